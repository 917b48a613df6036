"""Article page rendering pipeline.

RenderService owns the serving mode, the page cache, the template store and
the article loader. One instance is built at startup and shared by all
request handlers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from articlehost.core.articles import ArticleLoader, ArticleNotFound, ArticleReadError
from articlehost.core.mode import ModeController
from articlehost.core.page_cache import PageCache
from articlehost.core.settings import Settings
from articlehost.core.templates import TemplateKind, TemplateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedArticle:
    """A rendered page and the mode it was produced under.

    An empty body means the article does not exist.
    """

    body: bytes
    is_local: bool

    @property
    def found(self) -> bool:
        return len(self.body) > 0


class RenderService:
    """Renders articles into pages, caching them in production mode."""

    def __init__(
        self,
        settings: Settings,
        loader: ArticleLoader | None = None,
        template_store: TemplateStore | None = None,
    ) -> None:
        self.settings = settings
        self.loader = loader or ArticleLoader(settings.articles_dir)
        self.templates = template_store or TemplateStore(settings.templates_dir)
        self.pages = PageCache()
        self.mode = ModeController(self.pages, self.templates)

    def warm_up(self) -> None:
        """Compile all templates up front. Raises TemplateCompileError."""
        self.templates.warm_up()

    def is_local_host(self, host: str) -> bool:
        """Whether a Host header names the local development server."""
        hostname = host.split(":", 1)[0].strip().lower()
        return hostname in self.settings.local_hostnames

    def confirm_mode(self, is_local: bool) -> None:
        self.mode.set_mode(is_local)

    def render_article(self, identifier: str, page_url: str = "") -> RenderedArticle:
        """Return the page for an article, from cache when possible.

        Args:
            identifier: Article file name, e.g. ``101.html``.
            page_url: Canonical absolute URL of the page, used for social
                links in production.
        """
        identifier = identifier.lower()
        cached = self.mode.get_cached_page(identifier)
        if cached.found:
            return RenderedArticle(body=cached.page, is_local=cached.is_local)

        is_local = cached.is_local
        try:
            page = self._render(identifier, is_local, page_url)
        except ArticleReadError as e:
            logger.warning(f"Article read failed: {e}")
            return RenderedArticle(body=b"", is_local=is_local)

        if not is_local:
            self.mode.store_page(identifier, page)
        return RenderedArticle(body=page, is_local=is_local)

    def _render(self, identifier: str, is_local: bool, page_url: str) -> bytes:
        """Load and render one article.

        Returns an empty page for a missing article and the error text for
        a template failure. Raises ArticleReadError for other read failures.
        """
        try:
            article = self.loader.load(identifier)
        except ArticleNotFound:
            return b""

        params = {
            "article": article,
            "title": article.title_without_tags,
            "is_local_server": is_local,
            # Non-blank shows the social sharing buttons
            "social_link_url": "" if is_local else page_url,
        }
        try:
            template = self.templates.get_template(TemplateKind.ARTICLE, cache_it=not is_local)
            return template.render(**params).encode("utf-8")
        except Exception as e:
            # Template failures become the page body, never a 5xx
            logger.exception(f"Rendering article {identifier} failed")
            return (str(e) or type(e).__name__).encode("utf-8")
