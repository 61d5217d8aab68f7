"""Persistence for the inspection, client, and invoice collections."""
from inspection_desk.storage.store import (
    CLIENTS_KEY,
    INSPECTIONS_KEY,
    INVOICES_KEY,
    DocumentBackend,
    JsonFileBackend,
    MemoryBackend,
    Repositories,
    Repository,
    build_repositories,
    open_repositories,
)

__all__ = [
    "CLIENTS_KEY",
    "INSPECTIONS_KEY",
    "INVOICES_KEY",
    "DocumentBackend",
    "JsonFileBackend",
    "MemoryBackend",
    "Repositories",
    "Repository",
    "build_repositories",
    "open_repositories",
]
