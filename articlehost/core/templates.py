"""Compiled page templates with per-kind lazy slots.

Each kind has one slot. A slot is filled on first access when the caller
asks for caching and emptied again by invalidate_all(), which the mode
controller calls on every mode flip.
"""

from __future__ import annotations

import logging
import threading
from enum import IntEnum
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError, select_autoescape

logger = logging.getLogger(__name__)


class TemplateKind(IntEnum):
    """Page template kinds. BLANK is the fallback for unknown kinds."""

    ARTICLE = 0
    BLANK = 1


TEMPLATE_FILES = {
    TemplateKind.ARTICLE: "article.html",
}


class TemplateCompileError(Exception):
    """A page template could not be loaded or compiled."""

    def __init__(self, kind: TemplateKind, cause: Exception) -> None:
        super().__init__(f"Failed to compile {kind.name.lower()} template: {cause}")
        self.kind = kind


class TemplateStore:
    """Lazily compiled page templates. Thread-safe."""

    def __init__(self, templates_dir: Path) -> None:
        self._templates_dir = templates_dir
        self._slots: list[Template | None] = [None] * len(TemplateKind)
        self._lock = threading.Lock()

    def _compile(self, kind: TemplateKind) -> Template:
        """Compile a template with a fresh environment.

        The environment holds the parent templates pulled in by ``extends``,
        so a cached slot keeps the base layout it was compiled against.
        """
        env = Environment(
            loader=FileSystemLoader(str(self._templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            auto_reload=False,
        )
        try:
            if kind == TemplateKind.ARTICLE:
                return env.get_template(TEMPLATE_FILES[kind])
            return env.from_string("")
        except (TemplateError, OSError, UnicodeDecodeError) as e:
            raise TemplateCompileError(kind, e) from e

    def get_template(self, kind: int, cache_it: bool) -> Template:
        """Return the compiled template for a kind, compiling it if needed.

        Args:
            kind: Template kind; out-of-range values fall back to BLANK.
            cache_it: Use and fill the slot. When false the slot is ignored
                and the template is compiled afresh.

        Raises:
            TemplateCompileError: If compilation fails.
        """
        if not 0 <= kind < len(TemplateKind):
            kind = TemplateKind.BLANK
        kind = TemplateKind(kind)

        if not cache_it:
            return self._compile(kind)

        with self._lock:
            template = self._slots[kind]

        if template is None:
            template = self._compile(kind)
            with self._lock:
                self._slots[kind] = template
        return template

    def invalidate_all(self) -> None:
        """Reset every slot to uncompiled."""
        with self._lock:
            for i in range(len(self._slots)):
                self._slots[i] = None

    def warm_up(self) -> None:
        """Compile and cache every kind. Errors propagate."""
        for kind in TemplateKind:
            self.get_template(kind, cache_it=True)
            logger.info(f"Compiled {kind.name.lower()} template")

    def compiled_kinds(self) -> list[TemplateKind]:
        """Kinds whose compiled template is currently cached."""
        with self._lock:
            return [TemplateKind(i) for i, t in enumerate(self._slots) if t is not None]
