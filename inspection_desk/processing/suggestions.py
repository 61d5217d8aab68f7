"""AI text suggestions for inspection points and report summaries.

Calls the Gemini ``generateContent`` REST endpoint. Every outcome, including
a missing credential or a transport failure, comes back as a ``Suggestion``
value so callers can merge it into a draft without exception handling.
"""
from __future__ import annotations

import logging
import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from inspection_desk.core.errors import SuggestionConfigError
from inspection_desk.core.models import InspectionItem, Photo
from inspection_desk.core.utils import get_config_value, load_env_file

logger = logging.getLogger(__name__)

DEFAULT_SECRET_FILE = Path(__file__).resolve().parents[2] / "secrets" / "gemini.env"
DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MIME_TYPE = "image/jpeg"
_AI_ENV_LOADED = False

MISSING_KEY_MESSAGE = "API key not configured. Please set GEMINI_API_KEY in your environment variables."
DISABLED_MESSAGE = "AI suggestions are disabled (AI_SUGGESTIONS_DISABLED=1)."
ANALYSIS_FAILED_MESSAGE = "Could not analyze image."
SUMMARY_FAILED_MESSAGE = "Could not generate AI summary. Please check the logs for details."


def _ensure_ai_env() -> None:
    """Load AI credentials from a local secrets file once per process."""

    global _AI_ENV_LOADED
    if _AI_ENV_LOADED:
        return

    _AI_ENV_LOADED = True
    secret_location = os.getenv("AI_SECRET_FILE")
    path = Path(secret_location).expanduser() if secret_location else DEFAULT_SECRET_FILE
    load_env_file(path)


@dataclass(frozen=True)
class Suggestion:
    """Generated text, or the reason no text could be generated."""

    text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_text(self) -> str:
        return self.text if self.ok else f"Error: {self.error}"


def defect_prompt(point_description: str) -> str:
    return (
        f'Analyze this image which shows a potential defect related to "{point_description}". '
        "Describe the issue observed in the image in a concise, factual comment for an inspection report. "
        "Focus only on what is visually present. If no clear defect is visible, state that. "
        "Start your response directly with the description."
    )


def summary_prompt(failed_items: Iterable[InspectionItem]) -> str:
    lines = [
        f"- {item.category} - {item.point}: {item.comments or 'No comment.'} (Location: {item.location or 'General'})"
        for item in failed_items
    ]
    return (
        "You are an AI assistant for a property inspector. Your task is to generate a concise, professional, "
        "and easy-to-understand summary of findings for a property inspection report.\n"
        "Based on the following list of failed inspection points, create a summary.\n"
        "- Group related issues together (e.g., all plumbing issues, all electrical issues).\n"
        "- Start with the most critical issues.\n"
        "- Use clear headings and bullet points.\n"
        "- The tone should be objective and informative.\n\n"
        "Here are the failed items:\n" + "\n".join(lines)
    )


def _image_payload(photo: Photo) -> Dict[str, Any]:
    data = photo.image_data
    # Accept full data URLs as well as bare base64.
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    mime_type, _ = mimetypes.guess_type(photo.file_name or "")
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = DEFAULT_MIME_TYPE
    return {"inline_data": {"mime_type": mime_type, "data": data}}


class TextSuggestionService:
    """Gemini-backed defect analysis and failure summaries."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ) -> None:
        _ensure_ai_env()
        self.api_key = api_key or get_config_value("GEMINI_API_KEY") or None
        self.model = model or get_config_value("GEMINI_MODEL", DEFAULT_MODEL)
        self.base_url = (base_url or get_config_value("GEMINI_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.disabled = get_config_value("AI_SUGGESTIONS_DISABLED", "0") == "1"
        self.timeout = timeout
        self.session = session or (requests.Session() if self.api_key else None)

    def analyze_defect(self, photo: Photo, point_description: str) -> Suggestion:
        """Describe the defect visible in ``photo`` for one inspection point."""

        parts = [{"text": defect_prompt(point_description)}, _image_payload(photo)]
        return self._suggest(parts, ANALYSIS_FAILED_MESSAGE)

    def summarize_failures(self, failed_items: Iterable[InspectionItem]) -> Suggestion:
        """Summarize failed inspection points, grouped and most critical first."""

        return self._suggest([{"text": summary_prompt(failed_items)}], SUMMARY_FAILED_MESSAGE)

    def _suggest(self, parts: List[Dict[str, Any]], failure_message: str) -> Suggestion:
        try:
            self._require_ready()
        except SuggestionConfigError as exc:
            logger.error("Text suggestions unavailable: %s", exc)
            return Suggestion(error=str(exc))

        try:
            return Suggestion(text=self._generate(parts))
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("Gemini request failed: %s", exc)
            return Suggestion(error=failure_message)

    def _require_ready(self) -> None:
        if self.disabled:
            raise SuggestionConfigError(DISABLED_MESSAGE)
        if not self.api_key or self.session is None:
            raise SuggestionConfigError(MISSING_KEY_MESSAGE)

    def _generate(self, parts: List[Dict[str, Any]]) -> str:
        response = self.session.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
            json={"contents": [{"role": "user", "parts": parts}]},
            timeout=self.timeout,
        )
        response.raise_for_status()
        body = response.json()
        candidates = body.get("candidates") or []
        if not candidates:
            raise ValueError(f"no candidates returned (feedback: {body.get('promptFeedback')})")
        text = "".join(part.get("text", "") for part in candidates[0]["content"]["parts"]).strip()
        if not text:
            raise ValueError("empty response text")
        return text


def analyze_image_response(payload: Dict[str, Any], service: TextSuggestionService) -> Tuple[int, Dict[str, str]]:
    """Handle a defect-analysis request shaped like the HTTP endpoint.

    ``{"photo": {"imageData", "fileName"}, "pointDescription"}`` maps to
    ``(200, {"analysis"})`` on success and ``(status, {"error"})`` otherwise.
    """

    try:
        photo = Photo.from_dict(payload["photo"])
        point_description = payload.get("pointDescription") or ""
    except (KeyError, TypeError, AttributeError):
        return 400, {"error": "Request must include a photo and a pointDescription."}
    if not all(isinstance(value, str) for value in (photo.image_data, photo.file_name, point_description)):
        return 400, {"error": "imageData, fileName, and pointDescription must be strings."}
    if not photo.image_data:
        return 400, {"error": "Photo has no image data."}

    result = service.analyze_defect(photo, point_description)
    if result.ok:
        return 200, {"analysis": result.text}
    return 500, {"error": result.error}


def generate_summary_response(payload: Dict[str, Any], service: TextSuggestionService) -> Tuple[int, Dict[str, str]]:
    """Handle a failure-summary request shaped like the HTTP endpoint."""

    try:
        items = [
            InspectionItem(
                id=int(document.get("id") or 0),
                category=document.get("category", ""),
                point=document.get("point", ""),
                status="Fail",
                comments=document.get("comments") or "",
                location=document.get("location") or "",
            )
            for document in payload["failedItems"]
        ]
    except (KeyError, TypeError, AttributeError, ValueError):
        return 400, {"error": "Request must include a list of failedItems."}

    result = service.summarize_failures(items)
    if result.ok:
        return 200, {"summary": result.text}
    return 500, {"error": result.error}
