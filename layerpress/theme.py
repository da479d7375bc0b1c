from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .config import Theme

if TYPE_CHECKING:
    from .content import Document

logger = logging.getLogger(__name__)

NODE_TEMPLATE = "node.html"


def resolve_templates(document: Document, theme: Theme) -> list[Path]:
    """Return the template files for ``document``, most general first.

    The theme's default layout always comes first, whether or not it exists.
    Walking the document's base directory one component at a time, the
    current lookup directory contributes its ``node.html`` and then its
    ``<name>.html`` when they exist, before the component is appended to it.
    A front matter ``theme`` override is appended last so its blocks win.
    """
    paths = [theme.default_layout]
    lookup = theme.path
    for component in document.base_directory.split("/"):
        for candidate in (lookup / NODE_TEMPLATE, lookup / f"{document.name}.html"):
            if candidate.is_file():
                paths.append(candidate)
        lookup = lookup / component

    if document.meta is not None and document.meta.theme:
        paths.append(theme.node_path(document.meta.theme))

    logger.debug("Templates for %s: %s", document.path, [p.as_posix() for p in paths])
    return paths
