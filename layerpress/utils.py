from __future__ import annotations

import datetime as dt
import logging
import shutil
from pathlib import Path

from .errors import BuildError

logger = logging.getLogger(__name__)

DISPLAY_DATE_FMT = "%b %d"
ZERO_DATE = dt.datetime(1, 1, 1)

STARTER_LAYOUT = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{% block title %}{{ meta.title }}{% endblock %}</title>
</head>
<body>
  <main>
    {% block content %}
    <article>
      <h1><a href="{{ permalink }}">{{ meta.title }}</a></h1>
      <time>{{ meta.date_formatted }}</time>
      {{ body }}
    </article>
    {% endblock %}
  </main>
</body>
</html>
"""

STARTER_CONFIG = """title = "My Site"
description = ""
base_url = "/"
theme = "{theme}"
"""


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base or "/"
    return f"{base}/{path}"


def format_date(value: dt.datetime | dt.date) -> str:
    # strftime does not zero-pad years below 1000 on every platform
    return f"{value.year:04d} {value.strftime(DISPLAY_DATE_FMT)}"


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_tree(source: Path, dest: Path) -> int:
    """Copy ``source`` into ``dest`` recursively, merging with what is there.

    File permissions are preserved. Returns the number of files copied.
    """
    if not source.is_dir():
        raise NotADirectoryError(f"Source is not a directory: {source}")
    dest.mkdir(parents=True, exist_ok=True)
    copied = 0
    for item in sorted(source.iterdir()):
        target = dest / item.name
        if item.is_dir():
            copied += copy_tree(item, target)
        else:
            shutil.copy2(item, target)
            copied += 1
    logger.debug("Copied %d file(s) from %s to %s", copied, source, dest)
    return copied


def clean_output_dir(output_dir: Path, project_root: Path) -> None:
    if not output_dir.exists():
        return
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved:
        raise BuildError(output_dir, "refusing to clean project root")
    if not output_resolved.is_relative_to(root_resolved):
        raise BuildError(output_dir, "refusing to clean output directory outside project root")
    shutil.rmtree(output_dir)


def scaffold(root: Path, theme: str = "default") -> list[Path]:
    """Create the directory skeleton of a new site under ``root``.

    Existing files are left untouched. Returns the paths that were created.
    """
    created: list[Path] = []
    for directory in (
        root / "content",
        root / "themes" / theme / "layout",
        root / "themes" / theme / "asset",
        root / "public" / "asset",
    ):
        if not directory.exists():
            created.append(directory)
        directory.mkdir(parents=True, exist_ok=True)

    starter_files = {
        root / "themes" / theme / "layout" / "default.html": STARTER_LAYOUT,
        root / "site.toml": STARTER_CONFIG.format(theme=theme),
    }
    for path, text in starter_files.items():
        if path.exists():
            logger.info("Keeping existing %s", path)
            continue
        write_text(path, text)
        created.append(path)
    return created
