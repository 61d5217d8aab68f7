"""Run text suggestions in worker threads and merge them into the live draft.

Only the Gemini request runs off the caller's thread. Finished results are
applied by ``collect`` on the caller's thread, through the editor's ticket
check, so a result whose session has ended is dropped.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from inspection_desk.core.models import InspectionItem, Photo
from inspection_desk.editing.session import InspectionEditor, SessionTicket
from inspection_desk.processing.suggestions import (
    ANALYSIS_FAILED_MESSAGE,
    SUMMARY_FAILED_MESSAGE,
    Suggestion,
    TextSuggestionService,
)

logger = logging.getLogger(__name__)

ANALYSIS = "analysis"
SUMMARY = "summary"


def analysis_key(item_id: int, photo_index: int) -> str:
    return f"{ANALYSIS}:{item_id}:{photo_index}"


def summary_key(inspection_id: str) -> str:
    return f"{SUMMARY}:{inspection_id}"


@dataclass
class SuggestionJob:
    """One in-flight request and where its result belongs."""

    key: str
    kind: str
    ticket: SessionTicket
    future: Future
    area_id: Optional[int] = None
    item_id: Optional[int] = None
    applied: bool = False
    suggestion: Optional[Suggestion] = None


class SuggestionJobs:
    """Track background suggestion requests keyed by the action that started them."""

    def __init__(self, service: TextSuggestionService, executor: Optional[Executor] = None, max_workers: int = 2):
        self.service = service
        self.executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="suggestions")
        self._jobs: Dict[str, SuggestionJob] = {}
        self._lock = threading.Lock()

    def submit_defect_analysis(
        self, editor: InspectionEditor, area_id: int, item_id: int, photo_index: int, photo: Photo, point: str
    ) -> SuggestionJob:
        """Start analysing one photo; a second request for the same photo reuses the first."""

        key = analysis_key(item_id, photo_index)
        with self._lock:
            if key in self._jobs:
                return self._jobs[key]
            job = SuggestionJob(
                key=key,
                kind=ANALYSIS,
                ticket=editor.ticket(),
                future=self.executor.submit(self.service.analyze_defect, photo, point),
                area_id=area_id,
                item_id=item_id,
            )
            self._jobs[key] = job
        logger.info("Started defect analysis for item %s photo %s", item_id, photo_index)
        return job

    def submit_report_summary(self, editor: InspectionEditor, failed: Iterable[InspectionItem]) -> SuggestionJob:
        ticket = editor.ticket()
        key = summary_key(ticket.inspection_id)
        with self._lock:
            if key in self._jobs:
                return self._jobs[key]
            job = SuggestionJob(
                key=key,
                kind=SUMMARY,
                ticket=ticket,
                future=self.executor.submit(self.service.summarize_failures, list(failed)),
            )
            self._jobs[key] = job
        logger.info("Started report summary for %s", ticket.inspection_id)
        return job

    def is_pending(self, key: str) -> bool:
        with self._lock:
            return key in self._jobs

    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._jobs)

    def has_finished(self) -> bool:
        with self._lock:
            return any(job.future.done() for job in self._jobs.values())

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every tracked request has finished."""

        with self._lock:
            futures = [job.future for job in self._jobs.values()]
        wait(futures, timeout=timeout)

    def collect(self, editor: InspectionEditor) -> List[SuggestionJob]:
        """Apply finished results to ``editor`` and forget them.

        Returns every finished job; ``job.applied`` is ``False`` for results
        the editor dropped.
        """

        with self._lock:
            finished = [job for job in self._jobs.values() if job.future.done()]
            for job in finished:
                del self._jobs[job.key]

        for job in finished:
            suggestion = job.suggestion = self._result(job)
            if job.kind == ANALYSIS:
                job.applied = editor.apply_defect_analysis(job.ticket, job.area_id, job.item_id, suggestion)
            else:
                job.applied = editor.apply_report_summary(job.ticket, suggestion)
        return finished

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)

    def _result(self, job: SuggestionJob) -> Suggestion:
        error = job.future.exception()
        if error is None:
            return job.future.result()
        logger.error("Suggestion request %s failed: %s", job.key, error)
        return Suggestion(error=ANALYSIS_FAILED_MESSAGE if job.kind == ANALYSIS else SUMMARY_FAILED_MESSAGE)
