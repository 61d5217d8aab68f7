"""Property inspection record keeping with AI-assisted findings."""
from inspection_desk.core import (
    Client,
    ClientProperty,
    Inspection,
    InspectionArea,
    InspectionItem,
    Invoice,
    InvoiceServiceItem,
    Photo,
    configure_logging,
    format_currency,
    format_date,
    validate_inspection,
    validate_invoice,
)
from inspection_desk.editing import EditorState, InspectionEditor
from inspection_desk.processing import (
    Suggestion,
    TextSuggestionService,
    dashboard_counts,
    failed_items,
    recent,
)
from inspection_desk.storage import open_repositories

__all__ = [
    "Client",
    "ClientProperty",
    "EditorState",
    "Inspection",
    "InspectionArea",
    "InspectionEditor",
    "InspectionItem",
    "Invoice",
    "InvoiceServiceItem",
    "Photo",
    "Suggestion",
    "TextSuggestionService",
    "configure_logging",
    "dashboard_counts",
    "failed_items",
    "format_currency",
    "format_date",
    "open_repositories",
    "recent",
    "validate_inspection",
    "validate_invoice",
]
