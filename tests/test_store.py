"""Repository behavior over the JSON document store."""
import json
from pathlib import Path

from inspection_desk.core.models import Client, ClientProperty, Invoice, InvoiceServiceItem
from inspection_desk.storage import CLIENTS_KEY, INSPECTIONS_KEY, INVOICES_KEY, MemoryBackend, build_repositories


def _invoice(invoice_id: str, invoice_date: str, total: float = 105.0) -> Invoice:
    return Invoice(
        id=invoice_id,
        invoice_number=f"INV-{invoice_id}",
        invoice_date=invoice_date,
        due_date="2024-12-31",
        client_id="client_1",
        client_name="Ahmed Al Farsi",
        client_address="Villa 123, Al Mouj",
        client_email="ahmed.farsi@email.com",
        property_location="Villa 123, Al Mouj",
        services=[InvoiceServiceItem(id="s1", description="Inspection", quantity=1, unit_price=100, total=100)],
        subtotal=100,
        tax=5,
        total_amount=total,
        amount_paid=0,
        status="Unpaid",
    )


def test_saved_inspection_loads_back_field_for_field(file_repos, make_inspection):
    inspection = make_inspection(areas={"Kitchen": [("Sink", "Fail"), ("Tiles", "Pass")], "Bathroom": [("Fan", "N/A")]})

    file_repos.inspections.save(inspection)

    assert file_repos.inspections.get_by_id("insp_1") == inspection


def test_saved_invoice_and_client_load_back(file_repos):
    invoice = _invoice("inv_1", "2024-05-01")
    client = Client(
        id="client_9",
        name="Omar",
        email="omar@example.com",
        properties=[ClientProperty(id="p1", location="Flat 2", type="Residential", size=95.5)],
    )

    file_repos.invoices.save(invoice)
    file_repos.clients.save(client)

    assert file_repos.invoices.get_by_id("inv_1") == invoice
    assert file_repos.clients.get_by_id("client_9") == client


def test_collections_are_written_as_json_arrays(file_repos, data_dir: Path, make_inspection):
    file_repos.inspections.save(make_inspection())

    documents = json.loads((data_dir / "inspections.json").read_text(encoding="utf-8"))

    assert isinstance(documents, list)
    assert documents[0]["clientName"] == "Ahmed Al Farsi"


def test_saving_twice_keeps_a_single_entry(memory_repos, make_inspection):
    inspection = make_inspection()

    memory_repos.inspections.save(inspection)
    once = memory_repos.inspections.backend.read(INSPECTIONS_KEY)
    memory_repos.inspections.save(inspection)

    assert memory_repos.inspections.backend.read(INSPECTIONS_KEY) == once
    assert len(memory_repos.inspections.list_all()) == 1


def test_save_replaces_entity_with_same_id(memory_repos, make_inspection):
    memory_repos.inspections.save(make_inspection(client_name="Before"))
    memory_repos.inspections.save(make_inspection(client_name="After"))

    stored = memory_repos.inspections.list_all()
    assert [inspection.client_name for inspection in stored] == ["After"]


def test_inspections_are_listed_newest_first(memory_repos, make_inspection):
    for inspection_id, day in [("a", "2024-01-10"), ("b", "2024-03-01"), ("c", "2023-12-31"), ("d", "2024-02-15")]:
        memory_repos.inspections.save(make_inspection(inspection_id=inspection_id, inspection_date=day))

    dates = [inspection.inspection_date for inspection in memory_repos.inspections.list_all()]

    assert dates == sorted(dates, reverse=True)


def test_invoices_are_listed_newest_first(memory_repos):
    for invoice_id, day in [("1", "2024-04-01"), ("2", "2024-06-01"), ("3", "2024-05-01")]:
        memory_repos.invoices.save(_invoice(invoice_id, day))

    assert [invoice.id for invoice in memory_repos.invoices.list_all()] == ["2", "3", "1"]


def test_missing_entity_is_none(memory_repos):
    assert memory_repos.inspections.get_by_id("insp_missing") is None


def test_delete_removes_only_the_matching_entity(memory_repos, make_inspection):
    memory_repos.inspections.save(make_inspection(inspection_id="keep"))
    memory_repos.inspections.save(make_inspection(inspection_id="drop"))

    memory_repos.inspections.delete("drop")

    assert [inspection.id for inspection in memory_repos.inspections.list_all()] == ["keep"]


def test_corrupt_collection_reads_as_empty_and_logs(caplog):
    repos = build_repositories(MemoryBackend({INSPECTIONS_KEY: "{not json"}))

    caplog.set_level("ERROR")
    assert repos.inspections.list_all() == []
    assert "inspections" in caplog.text


def test_non_array_document_is_treated_as_corrupt():
    repos = build_repositories(MemoryBackend({INSPECTIONS_KEY: json.dumps({"id": "insp_1"})}))

    assert repos.inspections.list_all() == []


def test_save_after_corruption_rewrites_a_clean_collection(make_inspection):
    backend = MemoryBackend({INSPECTIONS_KEY: "[{broken"})
    repos = build_repositories(backend)

    repos.inspections.save(make_inspection())

    assert [inspection.id for inspection in repos.inspections.list_all()] == ["insp_1"]


def test_clients_are_seeded_once_and_persisted(memory_repos):
    backend = memory_repos.clients.backend
    assert backend.read(CLIENTS_KEY) is None

    clients = memory_repos.clients.list_all()

    assert [client.name for client in clients] == ["Ahmed Al Farsi", "Fatima Al Balushi", "Global Investments LLC"]
    seeded = backend.read(CLIENTS_KEY)
    assert seeded is not None

    memory_repos.clients.delete("client_2")
    assert [client.id for client in memory_repos.clients.list_all()] == ["client_1", "client_3"]


def test_empty_client_list_is_not_reseeded():
    repos = build_repositories(MemoryBackend({CLIENTS_KEY: "[]"}))

    assert repos.clients.list_all() == []


def test_collections_are_independent(memory_repos, make_inspection):
    memory_repos.inspections.save(make_inspection())
    memory_repos.invoices.save(_invoice("inv_1", "2024-01-01"))

    memory_repos.inspections.delete("insp_1")

    assert memory_repos.invoices.get_by_id("inv_1") is not None


def test_non_string_dates_sort_last_instead_of_raising(memory_repos, make_inspection):
    backend = memory_repos.inspections.backend
    memory_repos.inspections.save(make_inspection(inspection_id="dated", inspection_date="2024-01-10"))
    documents = json.loads(backend.read(INSPECTIONS_KEY))
    documents.append({"id": "numeric", "inspectionDate": 20240315, "areas": []})
    backend.write(INSPECTIONS_KEY, json.dumps(documents))
    backend.write(INVOICES_KEY, json.dumps([{"id": "inv_1", "invoiceDate": ["2024-01-01"]}]))

    assert [inspection.id for inspection in memory_repos.inspections.list_all()] == ["dated", "numeric"]
    assert [invoice.id for invoice in memory_repos.invoices.list_all()] == ["inv_1"]


def test_delete_reports_whether_a_record_matched(memory_repos, make_inspection):
    memory_repos.inspections.save(make_inspection())
    before = memory_repos.inspections.backend.read(INSPECTIONS_KEY)

    assert memory_repos.inspections.delete("insp_missing") is False
    assert memory_repos.inspections.backend.read(INSPECTIONS_KEY) == before
    assert memory_repos.inspections.delete("insp_1") is True
    assert memory_repos.inspections.list_all() == []
