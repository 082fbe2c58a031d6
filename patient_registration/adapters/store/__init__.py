"""Record store adapters - In-memory and database implementations."""

from .memory import InMemoryRecordStore
from .postgres import PostgresRecordStore, run_migrations

__all__ = ["InMemoryRecordStore", "PostgresRecordStore", "run_migrations"]
