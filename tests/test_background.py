"""Suggestions requested in the background and merged on a later pass."""
import threading

import pytest

from inspection_desk.core.models import Photo
from inspection_desk.editing import SuggestionJobs, analysis_key, summary_key
from inspection_desk.processing.suggestions import ANALYSIS_FAILED_MESSAGE, Suggestion


class GatedService:
    """Answer suggestion calls only once ``release`` is set."""

    def __init__(self, text: str = "Rust stain on the ceiling.") -> None:
        self.text = text
        self.release = threading.Event()
        self.calls = []

    def analyze_defect(self, photo, point):
        self.calls.append(("analysis", photo.file_name, point))
        self.release.wait(5)
        return Suggestion(text=self.text)

    def summarize_failures(self, items):
        self.calls.append(("summary", [item.point for item in items]))
        self.release.wait(5)
        return Suggestion(text=f"## Findings\n- {len(items)} issue(s)")


class BrokenService:
    def analyze_defect(self, photo, point):
        raise RuntimeError("worker crashed")


@pytest.fixture
def service():
    gated = GatedService()
    yield gated
    gated.release.set()


@pytest.fixture
def jobs(service):
    tracker = SuggestionJobs(service)
    yield tracker
    tracker.shutdown()


@pytest.fixture
def draft_with_photos(editor):
    draft = editor.new()
    area_id = draft.areas[0].id
    item = editor.add_item(area_id, "Structural & Interior", "Ceilings")
    editor.attach_photo(area_id, item.id, Photo("aGVsbG8=", "first.jpg"))
    editor.attach_photo(area_id, item.id, Photo("aGVsbG8=", "second.jpg"))
    return area_id, item.id


def test_editing_continues_while_analysis_runs(editor, jobs, service, draft_with_photos):
    area_id, item_id = draft_with_photos
    photo = editor.draft.areas[0].items[0].photos[0]

    jobs.submit_defect_analysis(editor, area_id, item_id, 0, photo, "Ceilings")
    editor.update_item(area_id, item_id, status="Fail", comments="Stain near vent")

    assert jobs.is_pending(analysis_key(item_id, 0))
    assert not jobs.is_pending(analysis_key(item_id, 1))
    assert jobs.collect(editor) == []

    service.release.set()
    jobs.wait(timeout=5)
    finished = jobs.collect(editor)

    assert [job.applied for job in finished] == [True]
    item = editor.draft.areas[0].items[0]
    assert item.status == "Fail"
    assert item.comments == "Stain near vent\n\nAI Analysis: Rust stain on the ceiling."
    assert not jobs.has_pending()


def test_each_photo_can_be_analyzed(editor, jobs, service, draft_with_photos):
    area_id, item_id = draft_with_photos
    photos = editor.draft.areas[0].items[0].photos

    jobs.submit_defect_analysis(editor, area_id, item_id, 1, photos[1], "Ceilings")
    service.release.set()
    jobs.wait(timeout=5)
    jobs.collect(editor)

    assert service.calls == [("analysis", "second.jpg", "Ceilings")]


def test_repeated_request_for_the_same_photo_is_not_resubmitted(editor, jobs, service, draft_with_photos):
    area_id, item_id = draft_with_photos
    photo = editor.draft.areas[0].items[0].photos[0]

    first = jobs.submit_defect_analysis(editor, area_id, item_id, 0, photo, "Ceilings")
    second = jobs.submit_defect_analysis(editor, area_id, item_id, 0, photo, "Ceilings")
    service.release.set()
    jobs.wait(timeout=5)

    assert first is second
    assert len(jobs.collect(editor)) == 1
    assert len(service.calls) == 1


def test_result_after_cancel_is_dropped(editor, jobs, service, draft_with_photos):
    area_id, item_id = draft_with_photos
    photo = editor.draft.areas[0].items[0].photos[0]
    jobs.submit_defect_analysis(editor, area_id, item_id, 0, photo, "Ceilings")

    editor.cancel()
    editor.new()
    service.release.set()
    jobs.wait(timeout=5)
    finished = jobs.collect(editor)

    assert [job.applied for job in finished] == [False]
    assert not jobs.has_pending()


def test_summary_job_replaces_ai_summary(editor, jobs, service, draft_with_photos):
    area_id, item_id = draft_with_photos
    editor.update_item(area_id, item_id, status="Fail")
    failures = [item for area in editor.draft.areas for item in area.items if item.status == "Fail"]

    jobs.submit_report_summary(editor, failures)
    assert jobs.is_pending(summary_key(editor.draft.id))
    service.release.set()
    jobs.wait(timeout=5)
    jobs.collect(editor)

    assert editor.draft.ai_summary == "## Findings\n- 1 issue(s)"


def test_worker_failure_is_merged_as_error_text(editor, draft_with_photos, caplog):
    area_id, item_id = draft_with_photos
    tracker = SuggestionJobs(BrokenService())
    photo = editor.draft.areas[0].items[0].photos[0]

    tracker.submit_defect_analysis(editor, area_id, item_id, 0, photo, "Ceilings")
    tracker.wait(timeout=5)
    tracker.collect(editor)
    tracker.shutdown()

    assert editor.draft.areas[0].items[0].comments == f"AI Analysis: Error: {ANALYSIS_FAILED_MESSAGE}"
    assert "worker crashed" in caplog.text
