"""Document shapes for the persisted entities."""
from inspection_desk.core.catalog import points_for, sample_clients
from inspection_desk.core.quality import validate_inspection
from inspection_desk.core.models import (
    Client,
    Inspection,
    InspectionItem,
    Invoice,
    InvoiceServiceItem,
    Photo,
)


def test_inspection_document_uses_camel_case_keys(make_inspection):
    document = make_inspection().to_dict()

    assert set(document) == {
        "id",
        "clientName",
        "propertyLocation",
        "propertyType",
        "inspectorName",
        "inspectionDate",
        "areas",
    }
    photo = document["areas"][0]["items"][0]["photos"][0]
    assert photo == {"imageData": "aGVsbG8=", "fileName": "Walls.jpg"}


def test_ai_summary_is_written_only_when_present(make_inspection):
    inspection = make_inspection()
    inspection.ai_summary = "Roof needs attention."

    document = inspection.to_dict()

    assert document["aiSummary"] == "Roof needs attention."
    assert Inspection.from_dict(document).ai_summary == "Roof needs attention."


def test_nested_inspection_survives_document_conversion(make_inspection):
    inspection = make_inspection(areas={"Kitchen": [("Sink", "Fail"), ("Tiles", "Pass")], "Roof": [("Drain", "N/A")]})

    assert Inspection.from_dict(inspection.to_dict()) == inspection


def test_legacy_photo_keys_are_accepted():
    photo = Photo.from_dict({"base64": "AAAA", "name": "crack.jpg"})

    assert photo == Photo(image_data="AAAA", file_name="crack.jpg")


def test_new_item_defaults():
    item = InspectionItem.from_dict({"id": 7, "category": "HVAC System", "point": "AC Units"})

    assert item.status == "N/A"
    assert item.comments == ""
    assert item.location == ""
    assert item.photos == []


def test_invoice_document_round_trip_keeps_service_order():
    invoice = Invoice(
        id="inv_1",
        invoice_number="INV-001",
        invoice_date="2024-02-01",
        due_date="2024-03-01",
        client_id="client_1",
        client_name="Ahmed Al Farsi",
        services=[
            InvoiceServiceItem(id="s1", description="Inspection", quantity=1, unit_price=150, total=150),
            InvoiceServiceItem(id="s2", description="Thermal imaging", quantity=2, unit_price=25, total=50),
        ],
        subtotal=200,
        tax=10,
        total_amount=210,
        status="Unpaid",
        template="modern",
    )

    document = invoice.to_dict()

    assert document["services"][1]["unitPrice"] == 25
    assert "notes" not in document
    restored = Invoice.from_dict(document)
    assert restored == invoice
    assert [service.id for service in restored.services] == ["s1", "s2"]


def test_sample_clients_are_independent_copies():
    first = sample_clients()
    second = sample_clients()
    first[0].name = "Changed"

    assert second[0].name == "Ahmed Al Farsi"
    assert [client.id for client in second] == ["client_1", "client_2", "client_3"]
    assert isinstance(second[2], Client)
    assert second[2].properties[1].size == 2500


def test_catalog_points_are_copies_and_unknown_categories_are_empty():
    points = points_for("Structural & Interior")
    points.append("Scratch")

    assert "Walls" in points_for("Structural & Interior")
    assert "Scratch" not in points_for("Structural & Interior")
    assert points_for("Spaceship") == []


def test_null_fields_load_as_empty_text():
    inspection = Inspection.from_dict(
        {
            "id": "insp_1",
            "clientName": None,
            "propertyLocation": None,
            "inspectorName": None,
            "inspectionDate": None,
            "areas": [{"id": 1, "name": None, "items": []}],
        }
    )
    invoice = Invoice.from_dict({"id": "inv_1", "invoiceNumber": None, "clientName": None, "dueDate": None})
    client = Client.from_dict({"id": "client_1", "name": None, "email": None, "properties": None})

    assert (inspection.client_name, inspection.inspection_date, inspection.areas[0].name) == ("", "", "")
    assert validate_inspection(inspection) == [
        "missing client name",
        "missing property location",
        "missing inspector name",
        "missing or invalid inspection date",
    ]
    assert (invoice.invoice_number, invoice.client_name, invoice.due_date) == ("", "", "")
    assert (client.name, client.email, client.properties) == ("", "", [])
