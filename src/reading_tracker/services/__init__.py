"""Services layer - aggregation, validation, and snapshot interchange."""

from reading_tracker.services.book_validator import BookValidator, ValidationResult
from reading_tracker.services.statistics_service import StatisticsService
from reading_tracker.services.snapshot_exporter import FORMAT_VERSION, SnapshotExporter
from reading_tracker.services.snapshot_importer import ImportResult, SnapshotImporter
from reading_tracker.services.snapshot_workers import ExportWorker, ImportWorker, WorkerSignals
from reading_tracker.services.settings_manager import SettingsManager
from reading_tracker.services.logging_setup import setup_logger

__all__ = [
	"BookValidator",
	"ValidationResult",
	"StatisticsService",
	"FORMAT_VERSION",
	"SnapshotExporter",
	"SnapshotImporter",
	"ImportResult",
	"ExportWorker",
	"ImportWorker",
	"WorkerSignals",
	"SettingsManager",
	"setup_logger",
]
