"""Cancellable export/import workers using Qt threading."""

import threading
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from reading_tracker.core import OperationCancelledError, TrackerError


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    cancelled = Signal()
    error = Signal(str)
    export_result = Signal(object)  # Path
    import_result = Signal(object)  # ImportResult


class _SnapshotWorker(QRunnable):
    """Base for workers that can be cancelled between books."""

    def __init__(self):
        super().__init__()
        self.signals = WorkerSignals()
        self._cancel_event = threading.Event()
        # callers keep the handle to cancel it
        self.setAutoDelete(False)

    def cancel(self) -> None:
        """Request cancellation; takes effect at the next book boundary."""
        self._cancel_event.set()

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @Slot()
    def run(self):
        try:
            self._execute()
        except OperationCancelledError:
            self.signals.cancelled.emit()
        except TrackerError as e:
            self.signals.error.emit(str(e))
        except Exception as e:
            # Catch any unexpected exceptions not handled by services
            self.signals.error.emit(f"Unexpected error: {str(e)}")
        finally:
            self.signals.finished.emit()

    def _execute(self) -> None:
        raise NotImplementedError


class ExportWorker(_SnapshotWorker):
    """
    Worker that writes a snapshot file in a background thread.

    Emits export_result with the written path on success.
    """

    def __init__(self, exporter, target_dir: Optional[Path] = None):
        super().__init__()
        self.exporter = exporter
        self.target_dir = target_dir

    def _execute(self) -> None:
        path = self.exporter.export_to_file(
            target_dir=self.target_dir,
            should_cancel=self.is_cancelled,
        )
        self.signals.export_result.emit(path)


class ImportWorker(_SnapshotWorker):
    """
    Worker that imports a snapshot file in a background thread.

    Emits import_result with the ImportResult on success. A cancelled or
    failed import leaves the library unchanged.
    """

    def __init__(self, importer, snapshot_path: Path):
        super().__init__()
        self.importer = importer
        self.snapshot_path = Path(snapshot_path)

    def _execute(self) -> None:
        result = self.importer.import_file(
            self.snapshot_path,
            should_cancel=self.is_cancelled,
        )
        self.signals.import_result.emit(result)
