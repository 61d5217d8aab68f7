"""Inspection draft editing."""
from inspection_desk.editing.background import SuggestionJob, SuggestionJobs, analysis_key, summary_key
from inspection_desk.editing.session import EditorState, InspectionEditor, SessionTicket

__all__ = [
    "EditorState",
    "InspectionEditor",
    "SessionTicket",
    "SuggestionJob",
    "SuggestionJobs",
    "analysis_key",
    "summary_key",
]
