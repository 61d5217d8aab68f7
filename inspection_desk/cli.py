"""Command-line access to the local inspection, client, and invoice store."""
import argparse
from pathlib import Path
from typing import Callable

from inspection_desk.core.formatting import format_currency, format_date
from inspection_desk.core.logging import configure_logging
from inspection_desk.core.quality import invoice_findings, validate_inspection
from inspection_desk.core.utils import resolve_data_dir
from inspection_desk.editing import InspectionEditor, SuggestionJob, SuggestionJobs
from inspection_desk.processing.aggregation import (
    dashboard_counts,
    failed_items,
    outstanding_balance,
    recent,
    status_breakdown,
)
from inspection_desk.processing.suggestions import TextSuggestionService
from inspection_desk.reporting.sinks import export_inspection, export_invoices
from inspection_desk.storage import Repositories, open_repositories

COLLECTIONS = ("inspections", "clients", "invoices")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per action."""

    parser = argparse.ArgumentParser(description="Manage property inspections, clients, and invoices")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding inspections.json, clients.json, and invoices.json "
        "(defaults to $INSPECTION_DATA_DIR or ./data)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("summary", help="Show dashboard totals and recent activity")

    list_parser = subparsers.add_parser("list", help="List the records of one collection")
    list_parser.add_argument("collection", choices=COLLECTIONS)

    show_parser = subparsers.add_parser("show", help="Show one inspection with its findings")
    show_parser.add_argument("inspection_id")

    export_parser = subparsers.add_parser("export", help="Export an inspection checklist")
    export_parser.add_argument("inspection_id")
    export_parser.add_argument("--sink", choices=["csv", "excel"], default="csv")
    export_parser.add_argument("--output", type=Path, help="Output file (defaults to output/<id>.csv|.xlsx)")

    invoices_parser = subparsers.add_parser("export-invoices", help="Export the invoice register")
    invoices_parser.add_argument("--sink", choices=["csv", "excel"], default="csv")
    invoices_parser.add_argument("--output", type=Path, help="Output file (defaults to output/invoices.csv|.xlsx)")

    summarize_parser = subparsers.add_parser("summarize", help="Generate and store an AI summary of failed items")
    summarize_parser.add_argument("inspection_id")

    analyze_parser = subparsers.add_parser("analyze", help="Run AI defect analysis on one of an item's photos")
    analyze_parser.add_argument("inspection_id")
    analyze_parser.add_argument("area_id", type=int)
    analyze_parser.add_argument("item_id", type=int)
    analyze_parser.add_argument(
        "--photo", type=int, default=-1, help="Photo position to analyze (defaults to the last photo)"
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a record by id")
    delete_parser.add_argument("collection", choices=COLLECTIONS)
    delete_parser.add_argument("record_id")
    return parser


def _default_output(name: str, sink: str) -> Path:
    return Path("output") / f"{name}{'.xlsx' if sink == 'excel' else '.csv'}"


def _print_summary(repos: Repositories) -> None:
    inspections = repos.inspections.list_all()
    clients = repos.clients.list_all()
    invoices = repos.invoices.list_all()
    counts = dashboard_counts(inspections, clients, invoices)

    print(f"Inspections: {counts.total_inspections}")
    print(f"Clients:     {counts.total_clients}")
    print(f"Invoices:    {counts.total_invoices}")
    print(f"Revenue:     {format_currency(counts.revenue)}")
    print(f"Outstanding: {format_currency(outstanding_balance(invoices))}")
    print("\nRecent inspections:")
    for inspection in recent(inspections):
        print(f"  {format_date(inspection.inspection_date)}  {inspection.client_name} - {inspection.property_location}")
    print("\nRecent invoices:")
    for invoice in recent(invoices):
        print(f"  Invoice #{invoice.invoice_number}  {invoice.client_name}  {format_currency(invoice.total_amount)}  {invoice.status}")


def _print_collection(repos: Repositories, collection: str) -> None:
    if collection == "inspections":
        for inspection in repos.inspections.list_all():
            print(
                f"{inspection.id}\t{format_date(inspection.inspection_date)}\t"
                f"{inspection.client_name}\t{inspection.property_location}\t{inspection.property_type}"
            )
    elif collection == "clients":
        for client in repos.clients.list_all():
            print(f"{client.id}\t{client.name}\t{client.email}\t{client.phone}\t{len(client.properties)} properties")
    else:
        invoices = repos.invoices.list_all()
        findings = invoice_findings(invoices)
        for invoice in invoices:
            flag = "  [review]" if invoice.id in findings else ""
            print(
                f"{invoice.id}\t#{invoice.invoice_number}\t{format_date(invoice.invoice_date)}\t"
                f"{invoice.client_name}\t{format_currency(invoice.total_amount)}\t{invoice.status}{flag}"
            )


def _print_inspection(repos: Repositories, inspection_id: str) -> None:
    inspection = repos.inspections.get_by_id(inspection_id)
    if inspection is None:
        raise SystemExit(f"Inspection {inspection_id} not found")

    print(f"{inspection.id}: {inspection.client_name} - {inspection.property_location} ({inspection.property_type})")
    print(f"Inspector: {inspection.inspector_name}  Date: {format_date(inspection.inspection_date)}")
    for area in inspection.areas:
        print(f"\n[{area.id}] {area.name}")
        for item in area.items:
            photos = f"  ({len(item.photos)} photo(s))" if item.photos else ""
            print(f"  [{item.id}] {item.status:<4} {item.category} - {item.point}{photos}")
            if item.comments:
                print(f"         {item.comments}")
    counts = status_breakdown(inspection)
    print("\n" + "  ".join(f"{status}: {count}" for status, count in counts.items()))
    for issue in validate_inspection(inspection):
        print(f"warning: {issue}")
    if inspection.ai_summary:
        print(f"\nAI summary:\n{inspection.ai_summary}")


def _await_suggestion(editor: InspectionEditor, submit: Callable[[SuggestionJobs], SuggestionJob]) -> SuggestionJob:
    """Run one suggestion request and merge it before returning."""

    jobs = SuggestionJobs(TextSuggestionService(), max_workers=1)
    try:
        job = submit(jobs)
        jobs.wait()
        jobs.collect(editor)
    finally:
        jobs.shutdown()
    return job


def _summarize(repos: Repositories, inspection_id: str) -> None:
    editor = InspectionEditor(repos.inspections)
    inspection = editor.load(inspection_id)
    if inspection is None:
        raise SystemExit(f"Inspection {inspection_id} not found")

    failures = failed_items(inspection)
    if not failures:
        print("No failed items to summarize.")
        editor.cancel()
        return

    job = _await_suggestion(editor, lambda jobs: jobs.submit_report_summary(editor, failures))
    editor.save()
    print(job.suggestion.as_text())


def _analyze(repos: Repositories, inspection_id: str, area_id: int, item_id: int, photo_index: int = -1) -> None:
    editor = InspectionEditor(repos.inspections)
    inspection = editor.load(inspection_id)
    if inspection is None:
        raise SystemExit(f"Inspection {inspection_id} not found")

    item = next(
        (item for area in inspection.areas if area.id == area_id for item in area.items if item.id == item_id),
        None,
    )
    if item is None:
        raise SystemExit(f"Item {item_id} not found in area {area_id}")
    if not item.photos:
        raise SystemExit(f"Item {item_id} has no photos to analyze")
    if not -len(item.photos) <= photo_index < len(item.photos):
        raise SystemExit(f"Item {item_id} has no photo at position {photo_index}")

    photo = item.photos[photo_index]
    job = _await_suggestion(
        editor,
        lambda jobs: jobs.submit_defect_analysis(editor, area_id, item_id, photo_index, photo, item.point),
    )
    editor.save()
    print(job.suggestion.as_text())


def main() -> None:
    """Entrypoint for the ``inspection-desk`` command."""

    configure_logging()
    args = build_parser().parse_args()
    repos = open_repositories(resolve_data_dir(args.data_dir))

    if args.command == "summary":
        _print_summary(repos)
    elif args.command == "list":
        _print_collection(repos, args.collection)
    elif args.command == "show":
        _print_inspection(repos, args.inspection_id)
    elif args.command == "export":
        inspection = repos.inspections.get_by_id(args.inspection_id)
        if inspection is None:
            raise SystemExit(f"Inspection {args.inspection_id} not found")
        output = export_inspection(inspection, args.output or _default_output(inspection.id, args.sink), args.sink)
        print(f"Wrote {output}")
    elif args.command == "export-invoices":
        output = export_invoices(
            repos.invoices.list_all(), args.output or _default_output("invoices", args.sink), args.sink
        )
        print(f"Wrote {output}")
    elif args.command == "summarize":
        _summarize(repos, args.inspection_id)
    elif args.command == "analyze":
        _analyze(repos, args.inspection_id, args.area_id, args.item_id, args.photo)
    elif args.command == "delete":
        if not getattr(repos, args.collection).delete(args.record_id):
            raise SystemExit(f"{args.record_id} not found in {args.collection}")
        print(f"Deleted {args.record_id} from {args.collection}")


if __name__ == "__main__":
    main()
