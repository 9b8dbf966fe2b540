from __future__ import annotations

import random
import threading
from collections.abc import Sequence

_rng = random.SystemRandom()


class EmptySelectionError(ValueError):
    """Raised when there is nothing to choose from."""


def select_random(elements: Sequence[str]) -> str:
    """Return one element of ``elements`` with uniform probability.

    Draws from the OS entropy source on every call, so consecutive picks are
    independent of each other.
    """
    if not elements:
        raise EmptySelectionError("the list is empty")
    return elements[_rng.randrange(len(elements))]


class SelectionState:
    """Holds the currently displayed image, shared by the scheduler and the web routes."""

    def __init__(self, initial: str = "") -> None:
        self._lock = threading.Lock()
        self._current = initial

    def get(self) -> str:
        with self._lock:
            return self._current

    def set(self, path: str) -> None:
        with self._lock:
            self._current = path
