from __future__ import annotations

from pathlib import Path

import pytest

from layerpress.config import SiteConfig

DEFAULT_LAYOUT = (
    "<html><head><title>{% block title %}{{ meta.title }}{% endblock %}</title></head>\n"
    '<body>{% block content %}<a href="{{ permalink }}">{{ meta.category }}</a>\n{{ body }}{% endblock %}</body></html>\n'
)


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def source(body: str = "# Hello", **meta: str) -> str:
    lines = [f'{key} = "{value}"' for key, value in meta.items()]
    return "+++\n" + "\n".join(lines) + "\n+++\n" + body


@pytest.fixture
def site(tmp_path, monkeypatch):
    """A site root with a default theme layout, used as the working directory."""
    monkeypatch.chdir(tmp_path)
    write(tmp_path / "themes" / "default" / "layout" / "default.html", DEFAULT_LAYOUT)
    (tmp_path / "content").mkdir()
    return tmp_path


@pytest.fixture
def config(site):
    return SiteConfig(title="Test Site")
