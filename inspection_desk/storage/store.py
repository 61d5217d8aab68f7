"""Device-local document store for inspections, clients, and invoices.

Each collection is kept as one JSON array under its collection key. Reads
that hit a corrupt document recover to an empty collection instead of
raising.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, TypeVar

from inspection_desk.core.catalog import sample_clients
from inspection_desk.core.formatting import parse_calendar_date
from inspection_desk.core.models import Client, Inspection, Invoice

logger = logging.getLogger(__name__)

INSPECTIONS_KEY = "inspections"
CLIENTS_KEY = "clients"
INVOICES_KEY = "invoices"

T = TypeVar("T", Inspection, Client, Invoice)


class DocumentBackend(Protocol):
    """Key-value storage for serialized collections."""

    def read(self, key: str) -> Optional[str]:
        ...

    def write(self, key: str, text: str) -> None:
        ...


class MemoryBackend:
    """Keep documents in a dict; handy for tests and previews."""

    def __init__(self, documents: Optional[Dict[str, str]] = None) -> None:
        self.documents: Dict[str, str] = dict(documents or {})

    def read(self, key: str) -> Optional[str]:
        return self.documents.get(key)

    def write(self, key: str, text: str) -> None:
        self.documents[key] = text


class JsonFileBackend:
    """Store each collection as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, text: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Readers never observe a partially written document.
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)


def _newest_first(value: Any) -> date:
    return parse_calendar_date(value) or date.min


class Repository(Generic[T]):
    """List, fetch, upsert, and delete the entities of one collection."""

    def __init__(
        self,
        backend: DocumentBackend,
        key: str,
        factory: Callable[[dict], T],
        date_field: Optional[str] = None,
        seed: Optional[Callable[[], List[T]]] = None,
    ) -> None:
        self.backend = backend
        self.key = key
        self.factory = factory
        self.date_field = date_field
        self.seed = seed

    def list_all(self) -> List[T]:
        """Return every stored entity, newest first for dated collections."""

        try:
            raw = self.backend.read(self.key)
            if not raw or not raw.strip():
                if self.seed is None:
                    return []
                return self._write_seed()
            documents = json.loads(raw)
            if not isinstance(documents, list):
                raise ValueError(f"expected a JSON array, got {type(documents).__name__}")
            entities = [self.factory(document) for document in documents]
            if self.date_field:
                entities.sort(key=lambda entity: _newest_first(getattr(entity, self.date_field)), reverse=True)
        except (OSError, ValueError, TypeError, KeyError, AttributeError):
            logger.exception("Could not read the %s collection; treating it as empty", self.key)
            return []
        return entities

    def get_by_id(self, entity_id: str) -> Optional[T]:
        for entity in self.list_all():
            if entity.id == entity_id:
                return entity
        return None

    def save(self, entity: T) -> None:
        """Insert ``entity`` or replace the stored entity with the same id."""

        entities = [existing for existing in self.list_all() if existing.id != entity.id]
        entities.append(entity)
        self._write(entities)
        logger.info("Saved %s %s", self.key, entity.id)

    def delete(self, entity_id: str) -> bool:
        """Remove the entity with ``entity_id``; returns ``False`` when none matched."""

        entities = self.list_all()
        remaining = [entity for entity in entities if entity.id != entity_id]
        if len(remaining) == len(entities):
            logger.info("Nothing to delete in %s for id %s", self.key, entity_id)
            return False
        self._write(remaining)
        logger.info("Deleted %s %s", self.key, entity_id)
        return True

    def _write(self, entities: List[T]) -> None:
        payload = json.dumps([entity.to_dict() for entity in entities], ensure_ascii=False)
        self.backend.write(self.key, payload)

    def _write_seed(self) -> List[T]:
        entities = self.seed()
        self._write(entities)
        logger.info("Seeded the %s collection with %d sample records", self.key, len(entities))
        return entities


@dataclass
class Repositories:
    """The three collections sharing one backend."""

    inspections: Repository[Inspection]
    clients: Repository[Client]
    invoices: Repository[Invoice]


def build_repositories(backend: DocumentBackend) -> Repositories:
    return Repositories(
        inspections=Repository(backend, INSPECTIONS_KEY, Inspection.from_dict, date_field="inspection_date"),
        clients=Repository(backend, CLIENTS_KEY, Client.from_dict, seed=sample_clients),
        invoices=Repository(backend, INVOICES_KEY, Invoice.from_dict, date_field="invoice_date"),
    )


def open_repositories(data_dir: Path) -> Repositories:
    """Open the JSON file store rooted at ``data_dir``."""

    logger.debug("Opening document store at %s", data_dir)
    return build_repositories(JsonFileBackend(data_dir))
