"""Compile a tree of TOML-fronted Markdown documents into a static HTML site."""

__version__ = "0.1.0"
