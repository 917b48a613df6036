from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Settings:
    root_path: Path
    default_article: str
    local_hostnames: tuple[str, ...]
    page_max_age: int
    static_max_age: int

    @property
    def articles_dir(self) -> Path:
        return self.root_path / "articles"

    @property
    def article_res_dir(self) -> Path:
        return self.articles_dir / "res"

    @property
    def templates_dir(self) -> Path:
        return self.root_path / "templates"

    @property
    def static_dir(self) -> Path:
        return self.root_path / "static"

    @property
    def default_article_path(self) -> str:
        return f"/article/{self.default_article}"

    @staticmethod
    def from_env() -> "Settings":
        def _i(name: str, default: str) -> int:
            return int(os.getenv(name, default).strip())

        def _list(name: str, default: str) -> tuple[str, ...]:
            raw = os.getenv(name, default)
            return tuple(h.strip().lower() for h in raw.split(",") if h.strip())

        return Settings(
            root_path=Path(os.getenv("CONTENT_ROOT", str(BASE_DIR)).strip()),
            default_article=os.getenv("DEFAULT_ARTICLE", "101.html").strip(),
            local_hostnames=_list("LOCAL_HOSTNAMES", "localhost"),
            page_max_age=_i("PAGE_MAX_AGE", "5000"),
            static_max_age=_i("STATIC_MAX_AGE", "360000"),  # 100 hours
        )
