from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

import markdown
from jinja2 import (
    BaseLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
)
from markupsafe import Markup

from .errors import Failure, TemplateLoadError
from .utils import write_text

if TYPE_CHECKING:
    from .content import Document

logger = logging.getLogger(__name__)

LAYER_PREFIX = "layer-"
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists", "codehilite"]
MARKDOWN_EXTENSION_CONFIGS = {"codehilite": {"guess_lang": False}}
LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")


def normalize_list_spacing(text: str) -> str:
    lines = text.splitlines()
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        list_match = LIST_MARKER_RE.match(line)
        if list_match and not list_match.group("indent"):
            if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                out.append("")
        out.append(line)
    return "\n".join(out)


def markdown_to_html(text: str) -> str:
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )
    return md.convert(normalize_list_spacing(text))


class CascadeLoader(BaseLoader):
    """Serve an ordered list of template files as one inheritance chain.

    ``layer-N`` is the N-th file with ``{% extends "layer-(N-1)" %}``
    prepended, so a later file only needs to redefine the blocks it changes.
    """

    def __init__(self, paths: Iterable[Path]) -> None:
        self.paths = [Path(p) for p in paths]

    def layer_name(self, index: int) -> str:
        return f"{LAYER_PREFIX}{index}"

    def get_source(self, environment: Environment, template: str):
        if not template.startswith(LAYER_PREFIX):
            raise TemplateNotFound(template)
        index = int(template[len(LAYER_PREFIX):])
        path = self.paths[index]
        try:
            source = path.read_text(encoding="utf-8")
            mtime = path.stat().st_mtime
        except OSError as exc:
            raise TemplateNotFound(path.as_posix()) from exc
        if index > 0:
            # same line, so error line numbers still match the file
            source = f'{{% extends "{self.layer_name(index - 1)}" %}}' + source
        return source, path.as_posix(), lambda: path.exists() and path.stat().st_mtime == mtime


def load_templates(paths: list[Path], helpers: dict | None = None) -> Template:
    """Load and compile every file in ``paths`` into a single template.

    Raises :class:`TemplateLoadError` when any file is missing or invalid.
    """
    if not paths:
        raise TemplateLoadError(Path("."), "no template files to load")
    loader = CascadeLoader(paths)
    env = Environment(
        loader=loader,
        undefined=StrictUndefined,
        autoescape=True,
        keep_trailing_newline=True,
    )
    env.globals.update(helpers or {})

    template = None
    for index, path in enumerate(loader.paths):
        try:
            template = env.get_template(loader.layer_name(index))
        except TemplateNotFound as exc:
            raise TemplateLoadError(path, "template file not found") from exc
        except TemplateSyntaxError as exc:
            raise TemplateLoadError(path, f"line {exc.lineno}: {exc.message}") from exc
    return template


def render_context(document: Document) -> dict:
    return {
        "meta": document.meta,
        "body": Markup(markdown_to_html(document.body)),
        "permalink": document.permalink,
    }


def compile_document(document: Document, output_dir: Path, helpers: dict | None = None) -> Failure | None:
    """Render ``document`` to ``<output_dir>/<base>/<name>/index.html``.

    Template loading problems are raised; render and write problems are
    returned as a :class:`Failure` after being logged.
    """
    if document.meta is None:
        return Failure(document.path, "render", "document has not been parsed").log()

    template = load_templates(document.template_paths, helpers)
    try:
        html_doc = template.render(**render_context(document))
    except Exception as exc:
        return Failure(document.path, "render", f"{type(exc).__name__}: {exc}").log()

    target = output_dir / document.output_path
    try:
        write_text(target, html_doc)
    except OSError as exc:
        return Failure(document.path, "write", f"{target}: {exc}").log()
    logger.info("Wrote %s", target)
    return None
