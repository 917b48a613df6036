"""Article loading and title extraction.

Articles are pre-authored HTML fragments stored as files under the
articles directory. The first ``<h1>...</h1>`` header of a fragment is
its title; it is split off so the page template can place it separately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from markupsafe import Markup

logger = logging.getLogger(__name__)

H1_OPEN = "<h1>"
H1_CLOSE = "</h1>"

# How far past the opening header the closing header may appear
TITLE_MAX_LEN = 128

TAG_SIGNS = ("<", ">")


class ArticleError(Exception):
    """Base class for article loading failures."""

    def __init__(self, identifier: str, message: str) -> None:
        super().__init__(message)
        self.identifier = identifier


class ArticleNotFound(ArticleError):
    """The backing file of an article does not exist."""


class ArticleReadError(ArticleError):
    """The backing file exists but could not be read."""


@dataclass(frozen=True)
class Article:
    """A parsed article fragment. Content is trusted HTML."""

    content: Markup
    title: Markup
    title_without_tags: str
    identifier_without_extension: str


def extract_title(markup: str) -> tuple[str, str] | None:
    """Split the first ``<h1>`` header off an article fragment.

    Returns:
        ``(title, rest)`` where title includes its wrapping tags and rest
        is everything after the closing header, or None when the opening
        header is missing or is not closed within TITLE_MAX_LEN characters.
    """
    start = markup.find(H1_OPEN)
    if start < 0:
        return None

    body_start = start + len(H1_OPEN)
    window = markup[body_start : body_start + TITLE_MAX_LEN]
    offset = window.find(H1_CLOSE)
    if offset < 0:
        return None

    end = body_start + offset + len(H1_CLOSE)
    return markup[start:end], markup[end:]


def strip_tags(fragment: str) -> str:
    """Drop ``<...>`` tags from a short inline fragment.

    A two-state scan: while outside a tag a ``<`` enters one, while inside
    a ``>`` leaves it. Only characters seen outside tags are kept.

    The fragment must hold nothing but well-formed inline tags and text
    without literal angle brackets; anything else gives garbled output
    rather than an error.
    """
    state = 0
    kept = []
    for ch in fragment:
        if ch == TAG_SIGNS[state]:
            state = (state + 1) & 1
        elif state == 0:
            kept.append(ch)
    return "".join(kept)


class ArticleLoader:
    """Reads article fragments from disk. Stateless, never caches."""

    def __init__(self, articles_dir: Path) -> None:
        self._articles_dir = articles_dir

    def load(self, identifier: str) -> Article:
        """Read and parse an article.

        Raises:
            ArticleNotFound: If no file backs the identifier.
            ArticleReadError: On any other I/O or decoding failure.
        """
        path = self._articles_dir / identifier
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ArticleNotFound(identifier, f"No such article: {identifier}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ArticleReadError(identifier, f"Cannot read article {identifier}: {e}") from e

        name = identifier.removesuffix(".html")

        parts = extract_title(raw)
        if parts is None:
            logger.warning(f"Title extraction failed for article {name}")
            return Article(
                content=Markup(raw),
                title=Markup(""),
                title_without_tags="",
                identifier_without_extension=name,
            )

        title, rest = parts
        return Article(
            content=Markup(rest),
            title=Markup(title),
            title_without_tags=strip_tags(title),
            identifier_without_extension=name,
        )
