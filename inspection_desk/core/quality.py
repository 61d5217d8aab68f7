"""Non-blocking quality checks for inspections and invoices.

Findings are reported for review; nothing here prevents a record from being
saved.
"""
import logging
from typing import Dict, Iterable, List

from inspection_desk.core.formatting import parse_calendar_date
from inspection_desk.core.models import (
    INVOICE_STATUSES,
    ITEM_STATUSES,
    PROPERTY_TYPES,
    Inspection,
    Invoice,
)

logger = logging.getLogger(__name__)

AMOUNT_TOLERANCE = 0.01


def validate_inspection(inspection: Inspection) -> List[str]:
    """Return a list of quality issues for a single inspection."""

    issues: List[str] = []

    # Identifying fields the capture form marks as required.
    if not inspection.client_name.strip():
        issues.append("missing client name")
    if not inspection.property_location.strip():
        issues.append("missing property location")
    if not inspection.inspector_name.strip():
        issues.append("missing inspector name")
    if parse_calendar_date(inspection.inspection_date) is None:
        issues.append("missing or invalid inspection date")
    if inspection.property_type not in PROPERTY_TYPES:
        issues.append(f"unknown property type {inspection.property_type!r}")

    for area in inspection.areas:
        for item in area.items:
            if item.status not in ITEM_STATUSES:
                issues.append(f"{area.name} / {item.point}: unknown status {item.status!r}")

    return issues


def validate_invoice(invoice: Invoice) -> List[str]:
    """Return a list of quality issues for a single invoice."""

    issues: List[str] = []

    if not invoice.invoice_number:
        issues.append("missing invoice number")
    if invoice.status not in INVOICE_STATUSES:
        issues.append(f"unknown status {invoice.status!r}")

    for service in invoice.services:
        expected_line = round(service.quantity * service.unit_price, 2)
        if abs(expected_line - service.total) > AMOUNT_TOLERANCE:
            issues.append(f"service {service.description!r}: quantity x unit price does not match total")

    expected_total = round(invoice.subtotal + invoice.tax, 2)
    if abs(expected_total - invoice.total_amount) > AMOUNT_TOLERANCE:
        issues.append("subtotal + tax does not match total")

    paid = invoice.amount_paid
    total = invoice.total_amount
    if invoice.status == "Paid" and paid + AMOUNT_TOLERANCE < total:
        issues.append("marked paid but amount paid is below total")
    elif invoice.status == "Unpaid" and paid > AMOUNT_TOLERANCE:
        issues.append("marked unpaid but a payment is recorded")
    elif invoice.status == "Partial" and not (AMOUNT_TOLERANCE < paid < total - AMOUNT_TOLERANCE):
        issues.append("marked partial but amount paid is not between zero and total")

    return issues


def invoice_findings(invoices: Iterable[Invoice]) -> Dict[str, List[str]]:
    """Map invoice ids to their quality issues, skipping clean invoices."""

    findings: Dict[str, List[str]] = {}
    for invoice in invoices:
        issues = validate_invoice(invoice)
        if issues:
            logger.warning("Quality issues for invoice %s: %s", invoice.invoice_number or invoice.id, "; ".join(issues))
            findings[invoice.id] = issues
    return findings
