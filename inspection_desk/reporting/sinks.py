"""Tabular exports of inspection checklists and the invoice register."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List

from inspection_desk.core.formatting import format_currency, format_date
from inspection_desk.core.models import Inspection, Invoice

INSPECTION_HEADERS = [
    "Area",
    "Category",
    "Point",
    "Status",
    "Location",
    "Comments",
    "Photos",
]

INVOICE_HEADERS = [
    "Invoice_Number",
    "Invoice_Date",
    "Due_Date",
    "Client_Name",
    "Property_Location",
    "Subtotal",
    "Tax",
    "Total_Amount",
    "Amount_Paid",
    "Status",
]


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.split())


def _format_amount(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:.2f}"


def inspection_rows(inspection: Inspection) -> List[Dict[str, Any]]:
    """One row per inspection point, in area order then item order."""

    rows: List[Dict[str, Any]] = []
    for area in inspection.areas:
        for item in area.items:
            rows.append(
                {
                    "Area": area.name,
                    "Category": item.category,
                    "Point": item.point,
                    "Status": item.status,
                    "Location": _clean_text(item.location),
                    "Comments": _clean_text(item.comments),
                    "Photos": len(item.photos),
                }
            )
    return rows


def invoice_rows(invoices: Iterable[Invoice]) -> List[Dict[str, Any]]:
    return [
        {
            "Invoice_Number": invoice.invoice_number,
            "Invoice_Date": invoice.invoice_date,
            "Due_Date": invoice.due_date,
            "Client_Name": _clean_text(invoice.client_name),
            "Property_Location": _clean_text(invoice.property_location),
            "Subtotal": _format_amount(invoice.subtotal),
            "Tax": _format_amount(invoice.tax),
            "Total_Amount": _format_amount(invoice.total_amount),
            "Amount_Paid": _format_amount(invoice.amount_paid),
            "Status": invoice.status,
        }
        for invoice in invoices
    ]


def inspection_heading(inspection: Inspection) -> List[List[str]]:
    """Key/value lines describing the inspection, placed above the checklist in Excel."""

    return [
        ["Client", inspection.client_name],
        ["Property", f"{inspection.property_location} ({inspection.property_type})"],
        ["Inspector", inspection.inspector_name],
        ["Date", format_date(inspection.inspection_date)],
    ]


def revenue_footer(invoices: Iterable[Invoice]) -> List[str]:
    invoices = list(invoices)
    return ["Revenue", format_currency(sum(invoice.total_amount for invoice in invoices))]


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def write_csv(rows: Iterable[Dict[str, Any]], output_path: Path, headers: List[str]) -> None:
    """Write rows to a CSV file with a fixed header order."""

    rows = list(rows)
    ensure_output_dir(output_path)

    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=headers)
        writer.writeheader()
        writer.writerows(rows)


def write_excel(
    rows: Iterable[Dict[str, Any]],
    output_path: Path,
    headers: List[str],
    sheet_title: str = "export",
    preamble: Iterable[List[Any]] = (),
    footer: Iterable[Any] | None = None,
) -> None:
    """Write rows to an Excel workbook using openpyxl."""

    rows = list(rows)

    try:
        from openpyxl import Workbook
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("openpyxl is required for Excel sinks") from exc

    ensure_output_dir(output_path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title[:31]
    preamble = list(preamble)
    for line in preamble:
        sheet.append(list(line))
    if preamble:
        sheet.append([])
    sheet.append(headers)
    for row in rows:
        sheet.append([row.get(header, "") for header in headers])
    if footer is not None:
        sheet.append(list(footer))
    workbook.save(output_path)


def export_inspection(inspection: Inspection, output_path: Path, sink: str = "csv") -> Path:
    rows = inspection_rows(inspection)
    if sink == "excel":
        write_excel(
            rows,
            output_path,
            INSPECTION_HEADERS,
            sheet_title=inspection.id,
            preamble=inspection_heading(inspection),
        )
    else:
        write_csv(rows, output_path, INSPECTION_HEADERS)
    return output_path


def export_invoices(invoices: Iterable[Invoice], output_path: Path, sink: str = "csv") -> Path:
    invoices = list(invoices)
    rows = invoice_rows(invoices)
    if sink == "excel":
        write_excel(rows, output_path, INVOICE_HEADERS, sheet_title="invoices", footer=revenue_footer(invoices))
    else:
        write_csv(rows, output_path, INVOICE_HEADERS)
    return output_path
