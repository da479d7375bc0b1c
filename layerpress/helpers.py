"""Functions made available to every template."""

from __future__ import annotations

from .config import SiteConfig
from .content import slugify
from .utils import format_date, join_url


def template_helpers(config: SiteConfig | None = None) -> dict:
    config = config or SiteConfig()

    def url_for(path: str) -> str:
        return join_url(config.base_url, path)

    return {
        "site": config,
        "join_url": join_url,
        "url_for": url_for,
        "slugify": slugify,
        "format_date": format_date,
    }
