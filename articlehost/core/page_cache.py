"""In-memory store of rendered article pages."""

from __future__ import annotations


class PageCache:
    """Maps article identifier to rendered page bytes.

    An empty page is a stored negative entry ("no such article") and is
    distinct from a missing key. No eviction: the article set is small and
    the whole cache is dropped on every mode flip.

    Not thread-safe on its own; ModeController guards it with its lock.
    """

    def __init__(self) -> None:
        self._pages: dict[str, bytes] = {}

    def get(self, identifier: str) -> tuple[bytes, bool]:
        """Return (page, present)."""
        key = identifier.lower()
        if key in self._pages:
            return self._pages[key], True
        return b"", False

    def put(self, identifier: str, page: bytes) -> None:
        self._pages[identifier.lower()] = page

    def clear(self) -> None:
        self._pages = {}

    def __contains__(self, identifier: str) -> bool:
        return identifier.lower() in self._pages

    def __len__(self) -> int:
        return len(self._pages)
