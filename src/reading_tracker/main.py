"""Main entry point for the reading tracker."""

import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from reading_tracker.coordinators import TrackerCoordinator
from reading_tracker.core import TrackerError
from reading_tracker.io import BookRepository, CoverStorage, DatabaseManager
from reading_tracker.services import (
    BookValidator,
    SettingsManager,
    SnapshotExporter,
    SnapshotImporter,
    StatisticsService,
    setup_logger,
)

USAGE = "usage: reading-tracker [stats | list | export [DIR] | import FILE | reset]"


def bootstrap(settings: Optional[SettingsManager] = None) -> TrackerCoordinator:
    """
    Build the object graph following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.

    Raises:
        InitializationError: If the database cannot be created.
    """
    settings = settings or SettingsManager()

    # 1. Initialize Infrastructure
    database = DatabaseManager(settings.db_path)
    database.initialize()
    cover_storage = CoverStorage(settings.data_dir)

    # 2. Construct Services
    repository = BookRepository(database)
    statistics = StatisticsService(database)
    exporter = SnapshotExporter(
        repository,
        statistics,
        cover_storage,
        export_dir=settings.export_dir,
        file_prefix=settings.export_prefix,
    )
    importer = SnapshotImporter(repository, BookValidator(), cover_storage)

    # 3. Instantiate Coordinator (Dependency Injection)
    return TrackerCoordinator(
        repository=repository,
        statistics=statistics,
        exporter=exporter,
        importer=importer,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Operator commands against the local library."""
    args = list(sys.argv[1:] if argv is None else argv)
    command = args[0] if args else "stats"

    settings = SettingsManager()
    setup_logger(settings.log_level)

    try:
        tracker = bootstrap(settings)
        if command == "stats":
            for key, value in tracker.get_statistics().to_dict().items():
                print(f"{key}: {value}")
        elif command == "list":
            for book in tracker.get_books():
                print(
                    f"{book.id}\t{book.status.value}\t"
                    f"{book.pages_read}/{book.total_pages}\t{book.title}"
                )
        elif command == "export":
            target = Path(args[1]) if len(args) > 1 else None
            print(tracker.export_data(target))
        elif command == "import" and len(args) > 1:
            result = tracker.import_data(Path(args[1]))
            print(f"Imported {result.imported_count} book(s)")
            for warning in result.warnings:
                print(f"warning: {warning}")
        elif command == "reset":
            print(f"Removed {tracker.reset_all()} book(s)")
        else:
            print(USAGE, file=sys.stderr)
            return 2
    except TrackerError as e:
        logger.error("{}", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
