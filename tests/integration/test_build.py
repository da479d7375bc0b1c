"""Integration tests for the build and init commands"""

import logging

from layerpress.cli import main
from tests.conftest import source, write


def test_blog_post_end_to_end(site):
    write(site / "content/blog/hello.md", '+++\ntitle = "Hi"\n+++\n# Hello')

    assert main(["build"]) == 0

    html_doc = (site / "public/blog/hello/index.html").read_text(encoding="utf-8")
    assert "<h1>Hello</h1>" in html_doc
    assert '<a href="/blog/hello/">blog</a>' in html_doc
    assert "<title>Hi</title>" in html_doc
    assert (site / "public/blog/index.html").is_file()
    assert (site / "public/index.html").is_file()


def test_root_document_end_to_end(site):
    write(site / "content/about.md", source("About us", title="About"))
    assert main(["build"]) == 0
    html_doc = (site / "public/about/index.html").read_text(encoding="utf-8")
    assert '<a href="/about/">' in html_doc


def test_build_reads_config_and_copies_assets(site):
    write(site / "site.toml", 'title = "Configured"\ntheme = "baja"\noutput = "dist"\n')
    write(site / "themes/baja/layout/default.html", "{{ site.title }}|{{ body }}")
    write(site / "themes/baja/asset/site.css", "body{}")
    write(site / "content/a.md", source("text"))

    assert main(["build", "--config", "site.toml"]) == 0

    assert (site / "dist/a/index.html").read_text(encoding="utf-8").startswith("Configured|")
    assert (site / "dist/asset/site.css").is_file()


def test_flags_override_config(site):
    write(site / "content/draft.md", "+++\ndraft = true\n+++\nwip")
    assert main(["build", "--no-drafts", "--output", "out"]) == 0
    assert (site / "out").is_dir()
    assert not (site / "out/draft").exists()


def test_malformed_document_exits_with_path(site, caplog):
    write(site / "content/blog/bad.md", "missing front matter")
    with caplog.at_level(logging.CRITICAL):
        assert main(["build"]) == 1
    assert "content/blog/bad.md" in caplog.text


def test_broken_template_exits(site, caplog):
    write(site / "themes/default/node.html", "{% block content %}")
    write(site / "content/a.md", source())
    assert main(["build"]) == 1
    assert "themes/default/node.html" in caplog.text


def test_soft_failures_do_not_change_exit_status(site, capsys):
    (site / "content/bad.md").write_bytes(b"\xff\xfe\xfa")
    write(site / "content/good.md", source())
    assert main(["build"]) == 0
    assert "1 document(s) failed" in capsys.readouterr().err
    assert (site / "public/good/index.html").is_file()


def test_init_then_build(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["init", "mysite"]) == 0
    write(tmp_path / "mysite/content/posts/first.md", source("# First", title="First"))
    monkeypatch.chdir(tmp_path / "mysite")

    assert main(["build"]) == 0

    html_doc = (tmp_path / "mysite/public/posts/first/index.html").read_text(encoding="utf-8")
    assert "<h1>First</h1>" in html_doc
    assert '<a href="/posts/first/">First</a>' in html_doc


def test_path_flags_resolve_like_config_keys(site):
    write(site / "sub/site.toml", 'title = "Sub"\n')
    write(site / "sub/themes/default/layout/default.html", "{{ body }}")
    write(site / "sub/pages/a.md", source("text"))

    assert main(["build", "--config", "sub/site.toml", "--content", "pages", "--output", "out"]) == 0

    assert (site / "sub/out/a/index.html").is_file()
    assert not (site / "out").exists()


def test_unreadable_config_exits_with_path(site, caplog):
    (site / "site.toml").mkdir()
    assert main(["build"]) == 1
    assert "site.toml" in caplog.text
