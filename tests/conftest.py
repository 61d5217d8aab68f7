"""Pytest configuration to make the local package importable without installation."""
import sys
from datetime import date
from pathlib import Path

import pytest
import requests

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import inspection_desk.processing.suggestions as suggestions
from inspection_desk.cli import main as cli_main
from inspection_desk.core.ids import IdGenerator
from inspection_desk.core.models import Inspection, InspectionArea, InspectionItem, Photo
from inspection_desk.editing import InspectionEditor
from inspection_desk.storage import MemoryBackend, build_repositories, open_repositories


@pytest.fixture(autouse=True)
def no_ai_credentials(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from real Gemini calls and any local secrets file."""

    # Set before deleting so teardown also clears keys loaded from secret files.
    for name in ("GEMINI_API_KEY", "AI_SUGGESTIONS_DISABLED"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("AI_SECRET_FILE", str(tmp_path / "no-secrets.env"))
    monkeypatch.setattr(suggestions, "_AI_ENV_LOADED", False)


@pytest.fixture
def memory_repos():
    """Repositories backed by an in-memory document store."""

    return build_repositories(MemoryBackend())


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def file_repos(data_dir: Path):
    """Repositories backed by JSON files in a temporary directory."""

    return open_repositories(data_dir)


@pytest.fixture
def frozen_ids() -> IdGenerator:
    """An id generator whose clock never advances."""

    return IdGenerator(clock=lambda: 1_700_000_000_000)


@pytest.fixture
def editor(memory_repos, frozen_ids) -> InspectionEditor:
    return InspectionEditor(memory_repos.inspections, id_generator=frozen_ids, today=lambda: date(2024, 3, 15))


@pytest.fixture
def make_inspection():
    """Build an inspection from ``{area_name: [(point, status), ...]}``."""

    def _make(
        inspection_id: str = "insp_1",
        areas: dict | None = None,
        inspection_date: str = "2024-03-15",
        client_name: str = "Ahmed Al Farsi",
    ) -> Inspection:
        areas = areas if areas is not None else {"General": [("Walls", "Pass")]}
        built = []
        next_id = 1
        for area_name, points in areas.items():
            items = []
            for point, status in points:
                items.append(
                    InspectionItem(
                        id=next_id + 100,
                        category="Structural & Interior",
                        point=point,
                        status=status,
                        comments=f"{point} checked",
                        location="Living room",
                        photos=[Photo(image_data="aGVsbG8=", file_name=f"{point}.jpg")],
                    )
                )
                next_id += 1
            built.append(InspectionArea(id=next_id, name=area_name, items=items))
            next_id += 1
        return Inspection(
            id=inspection_id,
            client_name=client_name,
            property_location="Villa 123, Al Mouj",
            property_type="Villa",
            inspector_name="Salim",
            inspection_date=inspection_date,
            areas=built,
        )

    return _make


class FakeResponse:
    def __init__(self, payload: dict, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> dict:
        return self.payload


class FakeSession:
    """Record ``post`` calls and answer with a canned response."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def post(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def gemini_reply():
    """Build a fake Gemini session that answers with ``text``."""

    def _reply(text: str = "", status_code: int = 200, error: Exception | None = None) -> FakeSession:
        payload = {"candidates": [{"content": {"parts": [{"text": text}]}}]} if text else {"candidates": []}
        return FakeSession(FakeResponse(payload, status_code), error=error)

    return _reply


@pytest.fixture
def run_cli(monkeypatch: pytest.MonkeyPatch):
    """Helper to invoke the CLI with custom arguments inside tests."""

    def _run(args: list[str]) -> None:
        monkeypatch.setattr(sys, "argv", ["inspection-desk", *args])
        cli_main()

    return _run
