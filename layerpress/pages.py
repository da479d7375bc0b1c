from __future__ import annotations

import html
import logging
from pathlib import Path

from .config import SiteConfig
from .content import Document
from .errors import Failure
from .helpers import template_helpers
from .render import load_templates
from .tree import BuildResult
from .utils import write_text

logger = logging.getLogger(__name__)


def listing_path(directory: str, site_wide: bool, output_dir: Path) -> Path:
    if site_wide or not directory:
        return output_dir / "index.html"
    return output_dir / directory / "index.html"


def build_document_cards(documents: list[Document]) -> str:
    cards = []
    for doc in documents:
        meta = doc.meta
        title = html.escape(meta.title or doc.name)
        tags = " ".join(f'<span class="chip">{html.escape(tag)}</span>' for tag in meta.tags)
        category = ""
        if meta.category:
            category = f'<span class="post-category">{html.escape(meta.category)}</span>'
        cards.append(
            '<article class="post-card">'
            '<div class="post-meta">'
            f'<span class="post-date">{html.escape(meta.date_formatted)}</span>'
            f"{category}"
            f'<div class="post-tags">{tags}</div>'
            "</div>"
            f'<h2 class="post-title"><a href="{html.escape(doc.permalink)}">{title}</a></h2>'
            "</article>"
        )
    return "\n".join(cards) if cards else "<p>No documents yet.</p>"


def render_builtin_listing(directory: str, documents: list[Document], site_wide: bool, config: SiteConfig) -> str:
    if site_wide:
        heading = page_title = config.title or "Home"
    else:
        heading = directory or "Home"
        page_title = f"{config.title} | {directory}" if config.title else directory
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{html.escape(page_title)}</title>\n"
        "</head>\n"
        "<body>\n"
        '<div class="section-head">'
        f"<h1>{html.escape(heading)}</h1>"
        f"<p>{html.escape(config.description)}</p>"
        "</div>\n"
        f'<div class="post-grid">{build_document_cards(documents)}</div>\n'
        "</body>\n"
        "</html>\n"
    )


def build_index(
    directory: str,
    documents: list[Document],
    site_wide: bool,
    config: SiteConfig,
    helpers: dict | None = None,
) -> Failure | None:
    """Write the listing page for ``documents``.

    ``site_wide`` selects the top-level page over a per-directory one. A theme
    ``layout/list.html`` is used when present, otherwise a plain built-in page.
    """
    target = listing_path(directory, site_wide, config.output_dir)
    list_layout = config.theme.list_layout
    if list_layout.is_file():
        template = load_templates([list_layout], helpers if helpers is not None else template_helpers(config))
        try:
            html_doc = template.render(
                directory=directory,
                documents=documents,
                site_wide=site_wide,
            )
        except Exception as exc:
            return Failure(list_layout, "render", f"listing for {directory or '/'}: {type(exc).__name__}: {exc}").log()
    else:
        html_doc = render_builtin_listing(directory, documents, site_wide, config)

    try:
        write_text(target, html_doc)
    except OSError as exc:
        return Failure(target, "write", str(exc)).log()
    logger.info("Wrote listing %s (%d document(s))", target, len(documents))
    return None


def generate_indexes(result: BuildResult, config: SiteConfig, helpers: dict | None = None) -> list[Failure]:
    """Write every per-directory listing, then the site-wide one."""
    index = result.index
    if not index.frozen:
        index.freeze()
    failures = []
    all_documents: list[Document] = []
    for directory, documents in index.items():
        all_documents.extend(documents)
        if not directory:
            # the site-wide page is written to the same file
            logger.debug("Root listing is replaced by the site-wide page")
            continue
        failure = build_index(directory, documents, False, config, helpers)
        if failure is not None:
            failures.append(failure)

    failure = build_index("", all_documents, True, config, helpers)
    if failure is not None:
        failures.append(failure)
    result.failures.extend(failures)
    return failures
