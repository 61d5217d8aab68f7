"""Edit session for one inspection draft.

Every edit rebuilds the touched node and its ancestors with
``dataclasses.replace`` so objects handed out earlier (to a UI, say) are
never mutated behind the caller's back.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from inspection_desk.core.errors import EditorStateError, UnknownEntityError
from inspection_desk.core.ids import IdGenerator, default_generator, new_inspection_id
from inspection_desk.core.models import (
    DEFAULT_AREA_NAME,
    DEFAULT_ITEM_STATUS,
    DEFAULT_PROPERTY_TYPE,
    ITEM_STATUSES,
    PROPERTY_TYPES,
    Inspection,
    InspectionArea,
    InspectionItem,
    Photo,
)
from inspection_desk.processing.suggestions import Suggestion
from inspection_desk.storage.store import Repository

logger = logging.getLogger(__name__)

INSPECTION_FIELDS = {
    "client_name",
    "property_location",
    "property_type",
    "inspector_name",
    "inspection_date",
    "ai_summary",
}
AREA_FIELDS = {"name"}
ITEM_FIELDS = {"category", "point", "status", "comments", "location"}


class EditorState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    SAVED = "saved"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SessionTicket:
    """Identity of an edit session captured before a slow collaborator call."""

    session_id: str
    inspection_id: str


def _check_fields(changes: Dict[str, Any], allowed: set, kind: str) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(f"Cannot edit {kind} field(s): {', '.join(sorted(unknown))}")


def _merge_comment(existing: str, addition: str) -> str:
    return f"{existing}\n\n{addition}" if existing else addition


class InspectionEditor:
    """Build or modify one inspection, then save it or throw it away."""

    def __init__(
        self,
        repository: Repository[Inspection],
        id_generator: Optional[IdGenerator] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.repository = repository
        self.ids = id_generator or default_generator()
        self._today = today or date.today
        self.state = EditorState.LOADING
        self.draft: Optional[Inspection] = None
        self._session_id: Optional[str] = None

    # -- session lifecycle -------------------------------------------------

    def new(self) -> Inspection:
        """Open a fresh draft with one empty "General" area."""

        self.draft = Inspection(
            id=new_inspection_id(self.ids),
            property_type=DEFAULT_PROPERTY_TYPE,
            inspection_date=self._today().isoformat(),
            areas=[InspectionArea(id=self.ids.next_id(), name=DEFAULT_AREA_NAME)],
        )
        self._start_session()
        return self.draft

    def load(self, inspection_id: str) -> Optional[Inspection]:
        """Open a stored inspection; returns ``None`` when it does not exist."""

        self.state = EditorState.LOADING
        self._session_id = None
        self.draft = self.repository.get_by_id(inspection_id)
        if self.draft is None:
            logger.info("Inspection %s not found", inspection_id)
            return None

        for area in self.draft.areas:
            self.ids.observe(area.id)
            for item in area.items:
                self.ids.observe(item.id)
        self._start_session()
        return self.draft

    def save(self) -> Inspection:
        draft = self._require_draft()
        self.repository.save(draft)
        self.state = EditorState.SAVED
        self._session_id = None
        return draft

    def cancel(self) -> None:
        if self.draft is not None:
            logger.debug("Discarding draft %s", self.draft.id)
        self.draft = None
        self.state = EditorState.CANCELLED
        self._session_id = None

    def ticket(self) -> SessionTicket:
        draft = self._require_draft()
        return SessionTicket(session_id=self._session_id, inspection_id=draft.id)

    def is_live(self, ticket: SessionTicket) -> bool:
        return (
            self.state is EditorState.READY
            and self.draft is not None
            and ticket.session_id == self._session_id
            and ticket.inspection_id == self.draft.id
        )

    # -- inspection fields -------------------------------------------------

    def update_fields(self, **changes: Any) -> Inspection:
        draft = self._require_draft()
        _check_fields(changes, INSPECTION_FIELDS, "inspection")
        if "property_type" in changes and changes["property_type"] not in PROPERTY_TYPES:
            raise ValueError(f"Unknown property type {changes['property_type']!r}")
        self.draft = replace(draft, **changes)
        return self.draft

    # -- areas -------------------------------------------------------------

    def add_area(self, name: Optional[str] = None) -> InspectionArea:
        draft = self._require_draft()
        area = InspectionArea(id=self.ids.next_id(), name=name or f"New Area {len(draft.areas) + 1}")
        self.draft = replace(draft, areas=[*draft.areas, area])
        return area

    def update_area(self, area_id: int, **changes: Any) -> InspectionArea:
        _check_fields(changes, AREA_FIELDS, "area")
        area = replace(self._find_area(area_id), **changes)
        self._replace_area(area)
        return area

    def remove_area(self, area_id: int) -> None:
        draft = self._require_draft()
        self._find_area(area_id)
        # Items and photos live inside the area, so dropping it drops them too.
        self.draft = replace(draft, areas=[area for area in draft.areas if area.id != area_id])

    # -- items -------------------------------------------------------------

    def add_item(self, area_id: int, category: str, point: str) -> InspectionItem:
        area = self._find_area(area_id)
        item = InspectionItem(id=self.ids.next_id(), category=category, point=point, status=DEFAULT_ITEM_STATUS)
        self._replace_area(replace(area, items=[*area.items, item]))
        return item

    def update_item(self, area_id: int, item_id: int, **changes: Any) -> InspectionItem:
        _check_fields(changes, ITEM_FIELDS, "item")
        if "status" in changes and changes["status"] not in ITEM_STATUSES:
            raise ValueError(f"Unknown item status {changes['status']!r}")
        item = replace(self._find_item(area_id, item_id), **changes)
        self._replace_item(area_id, item)
        return item

    def remove_item(self, area_id: int, item_id: int) -> None:
        area = self._find_area(area_id)
        self._find_item(area_id, item_id)
        self._replace_area(replace(area, items=[item for item in area.items if item.id != item_id]))

    # -- photos ------------------------------------------------------------

    def attach_photo(self, area_id: int, item_id: int, photo: Photo) -> InspectionItem:
        item = self._find_item(area_id, item_id)
        updated = replace(item, photos=[*item.photos, photo])
        self._replace_item(area_id, updated)
        return updated

    def detach_photo(self, area_id: int, item_id: int, index: int) -> InspectionItem:
        item = self._find_item(area_id, item_id)
        if not 0 <= index < len(item.photos):
            raise IndexError(f"Item {item_id} has no photo at position {index}")
        photos = item.photos[:index] + item.photos[index + 1 :]
        updated = replace(item, photos=photos)
        self._replace_item(area_id, updated)
        return updated

    # -- collaborator results ----------------------------------------------

    def apply_defect_analysis(
        self, ticket: SessionTicket, area_id: int, item_id: int, suggestion: Suggestion
    ) -> bool:
        """Append an analysis (or its error) to an item's comments.

        Returns ``False`` and leaves the draft alone when the session that
        requested the analysis has ended or the item has since been removed.
        """

        if not self.is_live(ticket):
            logger.info("Dropping defect analysis for item %s: edit session has ended", item_id)
            return False
        try:
            item = self._find_item(area_id, item_id)
        except UnknownEntityError:
            logger.info("Dropping defect analysis for item %s: item no longer exists", item_id)
            return False

        comment = f"AI Analysis: {suggestion.as_text()}"
        self._replace_item(area_id, replace(item, comments=_merge_comment(item.comments, comment)))
        return True

    def apply_report_summary(self, ticket: SessionTicket, suggestion: Suggestion) -> bool:
        if not self.is_live(ticket):
            logger.info("Dropping report summary for %s: edit session has ended", ticket.inspection_id)
            return False
        self.update_fields(ai_summary=suggestion.as_text())
        return True

    # -- helpers -----------------------------------------------------------

    def _start_session(self) -> None:
        self._session_id = uuid.uuid4().hex
        self.state = EditorState.READY

    def _require_draft(self) -> Inspection:
        if self.state is not EditorState.READY or self.draft is None:
            raise EditorStateError(f"No inspection draft is open (state: {self.state.value})")
        return self.draft

    def _find_area(self, area_id: int) -> InspectionArea:
        for area in self._require_draft().areas:
            if area.id == area_id:
                return area
        raise UnknownEntityError(f"No area with id {area_id}")

    def _find_item(self, area_id: int, item_id: int) -> InspectionItem:
        for item in self._find_area(area_id).items:
            if item.id == item_id:
                return item
        raise UnknownEntityError(f"No item with id {item_id} in area {area_id}")

    def _replace_area(self, updated: InspectionArea) -> None:
        draft = self._require_draft()
        areas: List[InspectionArea] = [updated if area.id == updated.id else area for area in draft.areas]
        self.draft = replace(draft, areas=areas)

    def _replace_item(self, area_id: int, updated: InspectionItem) -> None:
        area = self._find_area(area_id)
        items = [updated if item.id == updated.id else item for item in area.items]
        self._replace_area(replace(area, items=items))
