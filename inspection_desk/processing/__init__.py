"""Derived views and AI-backed text suggestions."""
from inspection_desk.processing.aggregation import (
    DashboardCounts,
    dashboard_counts,
    failed_items,
    outstanding_balance,
    recent,
    status_breakdown,
    total_revenue,
)
from inspection_desk.processing.suggestions import (
    Suggestion,
    TextSuggestionService,
    analyze_image_response,
    generate_summary_response,
)

__all__ = [
    "DashboardCounts",
    "Suggestion",
    "TextSuggestionService",
    "analyze_image_response",
    "dashboard_counts",
    "failed_items",
    "generate_summary_response",
    "outstanding_balance",
    "recent",
    "status_breakdown",
    "total_revenue",
]
