"""Identifier generation for inspections, areas, and items."""
from __future__ import annotations

import threading
import time


class IdGenerator:
    """Hand out millisecond timestamps that never repeat within a process.

    Two calls in the same millisecond get consecutive values instead of the
    same one, and ``observe`` pushes the counter past ids loaded from storage.
    """

    def __init__(self, clock=None) -> None:
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            self._last = max(int(self._clock()), self._last + 1)
            return self._last

    def observe(self, value: int) -> None:
        with self._lock:
            self._last = max(self._last, int(value))


_default_generator = IdGenerator()


def default_generator() -> IdGenerator:
    return _default_generator


def new_inspection_id(generator: IdGenerator | None = None) -> str:
    return f"insp_{(generator or _default_generator).next_id()}"


def new_client_id(generator: IdGenerator | None = None) -> str:
    return f"client_{(generator or _default_generator).next_id()}"


def new_invoice_id(generator: IdGenerator | None = None) -> str:
    return f"inv_{(generator or _default_generator).next_id()}"
