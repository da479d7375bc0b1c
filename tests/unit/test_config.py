"""Unit tests for config.py and utils.py"""

from pathlib import Path

import pytest

from layerpress.config import SiteConfig, Theme, load_config, load_site_config
from layerpress.errors import BuildError, ConfigError
from layerpress.utils import clean_output_dir, copy_tree, format_date, join_url, scaffold
from tests.conftest import write


def test_load_config_missing_file(tmp_path):
    assert load_config(tmp_path / "site.toml") == {}


@pytest.mark.parametrize(
    "name, text",
    [
        ("site.toml", 'theme = "baja"\ntitle = "T"\n'),
        ("site.yaml", "theme: baja\ntitle: T\n"),
        ("site.json", '{"theme": "baja", "title": "T"}'),
    ],
)
def test_load_config_formats(tmp_path, name, text):
    data = load_config(write(tmp_path / name, text))
    assert data == {"theme": "baja", "title": "T"}


@pytest.mark.parametrize("name, text", [("site.toml", "theme = "), ("site.json", "{"), ("site.yaml", "- a\n- b\n")])
def test_load_config_invalid(tmp_path, name, text):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path / name, text))


def test_site_config_resolves_paths_relative_to_file(tmp_path):
    path = write(tmp_path / "site" / "site.toml", 'theme = "baja"\noutput = "dist"\ndrafts = false\nauthor = "me"\n')
    config = load_site_config(path)
    assert config.theme_name == "baja"
    assert config.output_dir == tmp_path / "site" / "dist"
    assert config.content_dir == tmp_path / "site" / "content"
    assert config.drafts is False
    assert config.params == {"author": "me"}


def test_site_config_defaults():
    config = SiteConfig.from_mapping({})
    assert config.theme == Theme("default", Path("themes"))
    assert config.content_dir == Path("content")
    assert config.output_dir == Path("public")
    assert config.drafts is True


def test_theme_paths():
    theme = Theme("baja")
    assert theme.default_layout == Path("themes/baja/layout/default.html")
    assert theme.node_path("wide") == Path("themes/baja/layout/wide.html")


def test_join_url():
    assert join_url("/", "blog/a/") == "/blog/a/"
    assert join_url("https://example.com/", "/x/") == "https://example.com/x/"
    assert join_url("", "") == "/"


def test_format_date_pads_year():
    from datetime import datetime

    assert format_date(datetime(1, 1, 1)) == "0001 Jan 01"
    assert format_date(datetime(2024, 12, 9)) == "2024 Dec 09"


def test_copy_tree_merges(tmp_path):
    write(tmp_path / "src" / "css" / "site.css", "body{}")
    write(tmp_path / "dest" / "keep.txt", "keep")
    assert copy_tree(tmp_path / "src", tmp_path / "dest") == 1
    assert (tmp_path / "dest" / "css" / "site.css").read_text(encoding="utf-8") == "body{}"
    assert (tmp_path / "dest" / "keep.txt").exists()


def test_copy_tree_requires_directory(tmp_path):
    with pytest.raises(NotADirectoryError):
        copy_tree(write(tmp_path / "file", ""), tmp_path / "dest")


def test_clean_output_dir_refuses_root(tmp_path):
    with pytest.raises(BuildError):
        clean_output_dir(tmp_path, tmp_path)


def test_clean_output_dir_removes(tmp_path):
    write(tmp_path / "public" / "a.html", "")
    clean_output_dir(tmp_path / "public", tmp_path)
    assert not (tmp_path / "public").exists()


def test_scaffold_creates_skeleton_and_keeps_files(tmp_path):
    root = tmp_path / "blog"
    write(root / "site.toml", "title = 'mine'\n")
    created = scaffold(root, "baja")
    assert (root / "content").is_dir()
    assert (root / "public" / "asset").is_dir()
    assert (root / "themes" / "baja" / "layout" / "default.html") in created
    assert (root / "site.toml").read_text(encoding="utf-8") == "title = 'mine'\n"


def test_load_config_unreadable_is_config_error(tmp_path):
    (tmp_path / "site.toml").mkdir()
    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path / "site.toml")
    assert excinfo.value.path == tmp_path / "site.toml"


def test_load_config_invalid_utf8_is_config_error(tmp_path):
    path = tmp_path / "site.json"
    path.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(ConfigError):
        load_config(path)
