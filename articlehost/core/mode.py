"""Local/production serving mode and its cache invalidation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from articlehost.core.page_cache import PageCache
from articlehost.core.templates import TemplateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedPage:
    """Result of a cache lookup together with the mode it was read under."""

    page: bytes
    found: bool
    is_local: bool


class ModeController:
    """Tracks the serving mode. Thread-safe.

    One lock guards the mode flag and the page cache together, so a reader
    never sees the new mode alongside pages rendered under the old one.
    The template store keeps its own lock.
    """

    def __init__(
        self,
        page_cache: PageCache,
        template_store: TemplateStore,
        is_local: bool = False,
    ) -> None:
        self._pages = page_cache
        self._templates = template_store
        self._is_local = is_local
        self._lock = threading.Lock()

    def set_mode(self, observed_local: bool) -> bool:
        """Record the mode seen on a request.

        On a change, clears templates and pages before releasing the lock.

        Returns:
            True if the mode flipped.
        """
        with self._lock:
            if self._is_local == observed_local:
                return False
            self._is_local = observed_local
            self._templates.invalidate_all()
            self._pages.clear()
        logger.info(f"Serving mode switched to {'local' if observed_local else 'production'}")
        return True

    def is_local(self) -> bool:
        with self._lock:
            return self._is_local

    def get_cached_page(self, identifier: str) -> CachedPage:
        """Read a page and the current mode atomically."""
        with self._lock:
            page, found = self._pages.get(identifier)
            return CachedPage(page=page, found=found, is_local=self._is_local)

    def store_page(self, identifier: str, page: bytes) -> None:
        # Stale pages are dropped at flip time, so no mode check here
        with self._lock:
            self._pages.put(identifier, page)
