"""Core building blocks for the inspection desk package."""
from inspection_desk.core.errors import (
    EditorStateError,
    InspectionDeskError,
    SuggestionConfigError,
    UnknownEntityError,
)
from inspection_desk.core.formatting import format_currency, format_date
from inspection_desk.core.ids import IdGenerator
from inspection_desk.core.logging import configure_logging
from inspection_desk.core.models import (
    Client,
    ClientProperty,
    Inspection,
    InspectionArea,
    InspectionItem,
    Invoice,
    InvoiceServiceItem,
    Photo,
)
from inspection_desk.core.quality import validate_inspection, validate_invoice

__all__ = [
    "Client",
    "ClientProperty",
    "EditorStateError",
    "IdGenerator",
    "Inspection",
    "InspectionArea",
    "InspectionDeskError",
    "InspectionItem",
    "Invoice",
    "InvoiceServiceItem",
    "Photo",
    "SuggestionConfigError",
    "UnknownEntityError",
    "configure_logging",
    "format_currency",
    "format_date",
    "validate_inspection",
    "validate_invoice",
]
