"""Read-only views computed from loaded collections."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, TypeVar

from inspection_desk.core.models import ITEM_STATUSES, Client, Inspection, InspectionItem, Invoice

T = TypeVar("T")

RECENT_LIMIT = 5


@dataclass(frozen=True)
class DashboardCounts:
    total_inspections: int
    total_clients: int
    total_invoices: int
    revenue: float


def total_revenue(invoices: Iterable[Invoice]) -> float:
    """Sum of ``total_amount`` across invoices, whatever their status."""

    return sum(invoice.total_amount for invoice in invoices)


def outstanding_balance(invoices: Iterable[Invoice]) -> float:
    """Amount still owed across invoices; overpayments do not offset other invoices."""

    return sum(max(invoice.total_amount - invoice.amount_paid, 0.0) for invoice in invoices)


def dashboard_counts(
    inspections: Sequence[Inspection],
    clients: Sequence[Client],
    invoices: Sequence[Invoice],
) -> DashboardCounts:
    return DashboardCounts(
        total_inspections=len(inspections),
        total_clients=len(clients),
        total_invoices=len(invoices),
        revenue=total_revenue(invoices),
    )


def recent(entities: Sequence[T], limit: int = RECENT_LIMIT) -> List[T]:
    """First ``limit`` entries of a list already sorted newest first."""

    return list(entities[:limit])


def failed_items(inspection: Inspection) -> List[InspectionItem]:
    """Items marked ``Fail``, in area order and then item order."""

    return [item for area in inspection.areas for item in area.items if item.status == "Fail"]


def status_breakdown(inspection: Inspection) -> Dict[str, int]:
    counts = {status: 0 for status in ITEM_STATUSES}
    for area in inspection.areas:
        for item in area.items:
            counts[item.status] = counts.get(item.status, 0) + 1
    return counts
