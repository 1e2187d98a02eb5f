"""Database layer for ledgersync application."""

from ledgersync.database.base import Database
from ledgersync.database.factories import open_mapping_store

__all__ = ["Database", "open_mapping_store"]
