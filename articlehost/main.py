from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.types import Scope

from articlehost.core.renderer import RenderService
from articlehost.core.settings import Settings

logger = logging.getLogger(__name__)

NO_CACHE = "no-cache, private, max-age=0"


class CachedStaticFiles(StaticFiles):
    """StaticFiles that marks every file response as cacheable."""

    def __init__(self, *, max_age: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.max_age = max_age

    def file_response(
        self,
        full_path: str | os.PathLike[str],
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        response = super().file_response(full_path, stat_result, scope, status_code)
        response.headers["Cache-Control"] = f"max-age={self.max_age}"
        return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app. Template compile errors here are fatal."""
    s = settings or Settings.from_env()
    service = RenderService(s)
    service.warm_up()

    app = FastAPI(title="articlehost", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = s
    app.state.render_service = service

    @app.middleware("http")
    async def confirm_serving_mode(request: Request, call_next):
        """Every request, static ones included, decides the serving mode."""
        svc: RenderService = request.app.state.render_service
        svc.confirm_mode(svc.is_local_host(request.headers.get("host", "")))
        return await call_next(request)

    # Mounted before the article route so resources are not rendered as articles
    app.mount(
        "/article/res",
        CachedStaticFiles(directory=str(s.article_res_dir), check_dir=False, max_age=s.static_max_age),
        name="article_res",
    )
    app.mount(
        "/static",
        CachedStaticFiles(directory=str(s.static_dir), check_dir=False, max_age=s.static_max_age),
        name="static",
    )

    def redirect_to_default(cache_control: str | None = None) -> RedirectResponse:
        headers = {"Cache-Control": cache_control} if cache_control else None
        return RedirectResponse(url=s.default_article_path, status_code=307, headers=headers)

    @app.get("/")
    def home():
        return redirect_to_default()

    @app.get("/article/{article_id}")
    def article(request: Request, article_id: str):
        svc: RenderService = request.app.state.render_service
        rendered = svc.render_article(article_id, page_url=str(request.url))

        if not rendered.found:
            return redirect_to_default(NO_CACHE)

        cache_control = NO_CACHE if rendered.is_local else f"max-age={s.page_max_age}"
        return HTMLResponse(content=rendered.body, headers={"Cache-Control": cache_control})

    @app.get("/{path:path}")
    def fallback(path: str):
        # Soft 404
        logger.debug(f"Unknown path /{path}, redirecting")
        return redirect_to_default()

    return app


app = create_app()
