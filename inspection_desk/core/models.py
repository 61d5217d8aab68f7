"""Data models for inspections, clients, and invoices."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ITEM_STATUSES = ("Pass", "Fail", "N/A")
PROPERTY_TYPES = ("Apartment", "Villa", "Building", "Other")
CLIENT_PROPERTY_TYPES = ("Commercial", "Residential")
INVOICE_STATUSES = ("Paid", "Unpaid", "Partial", "Draft")
INVOICE_TEMPLATES = ("classic", "modern", "compact")

DEFAULT_ITEM_STATUS = "N/A"
DEFAULT_PROPERTY_TYPE = "Apartment"
DEFAULT_AREA_NAME = "General"


def _number(value: Any, default: float = 0.0) -> float:
    if value in (None, ""):
        return default
    return float(value)


@dataclass(frozen=True)
class Photo:
    """A single base64-encoded image attached to an inspection point."""

    image_data: str
    file_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"imageData": self.image_data, "fileName": self.file_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Photo":
        # Older browser exports stored photos as {"base64", "name"}.
        image_data = data.get("imageData", data.get("base64") or "")
        file_name = data.get("fileName", data.get("name") or "")
        return cls(image_data=image_data or "", file_name=file_name or "")


@dataclass
class InspectionItem:
    """One inspection point checked inside an area."""

    id: int
    category: str
    point: str
    status: str = DEFAULT_ITEM_STATUS
    comments: str = ""
    location: str = ""
    photos: List[Photo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "point": self.point,
            "status": self.status,
            "comments": self.comments,
            "location": self.location,
            "photos": [photo.to_dict() for photo in self.photos],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InspectionItem":
        return cls(
            id=int(data["id"]),
            category=data.get("category") or "",
            point=data.get("point") or "",
            status=data.get("status") or DEFAULT_ITEM_STATUS,
            comments=data.get("comments") or "",
            location=data.get("location") or "",
            photos=[Photo.from_dict(photo) for photo in data.get("photos") or []],
        )


@dataclass
class InspectionArea:
    """A named grouping of inspection points, e.g. "Kitchen"."""

    id: int
    name: str
    items: List[InspectionItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "items": [item.to_dict() for item in self.items]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InspectionArea":
        return cls(
            id=int(data["id"]),
            name=data.get("name") or "",
            items=[InspectionItem.from_dict(item) for item in data.get("items") or []],
        )


@dataclass
class Inspection:
    """Top-level record of one property visit."""

    id: str
    client_name: str = ""
    property_location: str = ""
    property_type: str = DEFAULT_PROPERTY_TYPE
    inspector_name: str = ""
    inspection_date: str = ""
    areas: List[InspectionArea] = field(default_factory=list)
    ai_summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "clientName": self.client_name,
            "propertyLocation": self.property_location,
            "propertyType": self.property_type,
            "inspectorName": self.inspector_name,
            "inspectionDate": self.inspection_date,
            "areas": [area.to_dict() for area in self.areas],
        }
        if self.ai_summary is not None:
            payload["aiSummary"] = self.ai_summary
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Inspection":
        return cls(
            id=str(data["id"]),
            client_name=data.get("clientName") or "",
            property_location=data.get("propertyLocation") or "",
            property_type=data.get("propertyType") or DEFAULT_PROPERTY_TYPE,
            inspector_name=data.get("inspectorName") or "",
            inspection_date=data.get("inspectionDate") or "",
            areas=[InspectionArea.from_dict(area) for area in data.get("areas") or []],
            ai_summary=data.get("aiSummary"),
        )


@dataclass
class ClientProperty:
    """A property owned by a client; size is in square meters."""

    id: str
    location: str
    type: str
    size: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "location": self.location, "type": self.type, "size": self.size}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientProperty":
        return cls(
            id=str(data["id"]),
            location=data.get("location") or "",
            type=data.get("type") or "Residential",
            size=_number(data.get("size")),
        )


@dataclass
class Client:
    id: str
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    properties: List[ClientProperty] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "properties": [prop.to_dict() for prop in self.properties],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Client":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            address=data.get("address") or "",
            properties=[ClientProperty.from_dict(prop) for prop in data.get("properties") or []],
        )


@dataclass
class InvoiceServiceItem:
    """A billable line; ``total`` is expected to equal ``quantity * unit_price``."""

    id: str
    description: str
    quantity: float
    unit_price: float
    total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceServiceItem":
        return cls(
            id=str(data["id"]),
            description=data.get("description") or "",
            quantity=_number(data.get("quantity")),
            unit_price=_number(data.get("unitPrice")),
            total=_number(data.get("total")),
        )


@dataclass
class Invoice:
    """An invoice with a denormalized snapshot of the client at invoice time."""

    id: str
    invoice_number: str
    invoice_date: str
    due_date: str = ""
    client_id: str = ""
    client_name: str = ""
    client_address: str = ""
    client_email: str = ""
    property_location: str = ""
    services: List[InvoiceServiceItem] = field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total_amount: float = 0.0
    amount_paid: float = 0.0
    status: str = "Draft"
    notes: Optional[str] = None
    template: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "invoiceNumber": self.invoice_number,
            "invoiceDate": self.invoice_date,
            "dueDate": self.due_date,
            "clientId": self.client_id,
            "clientName": self.client_name,
            "clientAddress": self.client_address,
            "clientEmail": self.client_email,
            "propertyLocation": self.property_location,
            "services": [service.to_dict() for service in self.services],
            "subtotal": self.subtotal,
            "tax": self.tax,
            "totalAmount": self.total_amount,
            "amountPaid": self.amount_paid,
            "status": self.status,
        }
        if self.notes is not None:
            payload["notes"] = self.notes
        if self.template is not None:
            payload["template"] = self.template
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Invoice":
        return cls(
            id=str(data["id"]),
            invoice_number=data.get("invoiceNumber") or "",
            invoice_date=data.get("invoiceDate") or "",
            due_date=data.get("dueDate") or "",
            client_id=data.get("clientId") or "",
            client_name=data.get("clientName") or "",
            client_address=data.get("clientAddress") or "",
            client_email=data.get("clientEmail") or "",
            property_location=data.get("propertyLocation") or "",
            services=[InvoiceServiceItem.from_dict(service) for service in data.get("services") or []],
            subtotal=_number(data.get("subtotal")),
            tax=_number(data.get("tax")),
            total_amount=_number(data.get("totalAmount")),
            amount_paid=_number(data.get("amountPaid")),
            status=data.get("status") or "Draft",
            notes=data.get("notes"),
            template=data.get("template"),
        )
