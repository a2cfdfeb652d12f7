# lexisnap/services/selection.py
"""
Ordered, text-deduplicated set of selected snippets.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from lexisnap.models.types import SelectedSnippet

logger = logging.getLogger(__name__)

ID_PREFIX_CHARS = 10


class SelectionSet:
    """
    Snippets in insertion order, at most one per distinct text.

    Mutations hold a lock so the duplicate check and the append are atomic.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._items: list[SelectedSnippet] = []
        self._lock = threading.Lock()

    def _make_id(self, text: str) -> str:
        base = f"{int(self._clock() * 1000)}-{text[:ID_PREFIX_CHARS]}"
        taken = {item.id for item in self._items}
        snippet_id = base
        suffix = 1
        while snippet_id in taken:
            snippet_id = f"{base}-{suffix}"
            suffix += 1
        return snippet_id

    def add(self, text: str) -> Optional[SelectedSnippet]:
        """Add text; no-op (returns None) if the same text is already selected."""
        with self._lock:
            if any(item.text == text for item in self._items):
                logger.debug("Snippet already selected: %r", text[:40])
                return None
            snippet = SelectedSnippet(id=self._make_id(text), text=text)
            self._items.append(snippet)
            return snippet

    def remove(self, snippet_id: str) -> bool:
        """Remove by id. Returns False if the id was not present."""
        with self._lock:
            remaining = [item for item in self._items if item.id != snippet_id]
            removed = len(remaining) != len(self._items)
            self._items = remaining
            return removed

    def clear(self) -> None:
        with self._lock:
            self._items = []

    def list(self) -> list[SelectedSnippet]:
        """Snapshot in insertion order"""
        with self._lock:
            return list(self._items)

    def texts(self) -> list[str]:
        return [item.text for item in self.list()]

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, text: object) -> bool:
        return any(item.text == text for item in self.list())
