"""Coordinators layer - wiring between services and the presentation layer."""

from reading_tracker.coordinators.tracker_coordinator import TrackerCoordinator

__all__ = ["TrackerCoordinator"]
