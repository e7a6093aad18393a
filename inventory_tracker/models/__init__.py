"""SQLAlchemy models for the inventory tracker."""

from inventory_tracker.models.storage_entry import StorageEntry

__all__ = ["StorageEntry"]
