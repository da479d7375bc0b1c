from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .config import DEFAULT_CONFIG, DEFAULT_THEME, SiteConfig, load_site_config
from .errors import BuildError
from .helpers import template_helpers
from .pages import generate_indexes
from .tree import build_site_tree
from .utils import clean_output_dir, copy_tree, scaffold

logger = logging.getLogger("layerpress")


def build_site(config: SiteConfig, project_root: Path) -> int:
    """Build the whole site and return the number of soft failures."""
    if config.clean:
        clean_output_dir(config.output_dir, project_root)
    config.output_dir.mkdir(parents=True, exist_ok=True)

    helpers = template_helpers(config)
    result = build_site_tree(config, helpers)
    generate_indexes(result, config, helpers)

    asset_dir = config.theme.asset_dir
    if asset_dir.is_dir():
        copy_tree(asset_dir, config.output_dir / "asset")
    return len(result.failures)


def run_build(args: argparse.Namespace) -> int:
    config_path = Path(args.config)
    project_root = config_path.resolve().parent
    config = load_site_config(config_path)
    if args.theme:
        config.theme_name = args.theme
    if args.content:
        config.content_dir = config_path.parent / args.content
    if args.output:
        config.output_dir = config_path.parent / args.output
    if args.drafts is not None:
        config.drafts = args.drafts
    if args.clean is not None:
        config.clean = args.clean

    start = time.perf_counter()
    failures = build_site(config, project_root)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    if failures:
        print(f"{failures} document(s) failed, see the log above.", file=sys.stderr)
    print(f"Site generated in: {config.output_dir}")
    return 0


def run_init(args: argparse.Namespace) -> int:
    root = Path(args.name)
    created = scaffold(root, args.theme)
    for path in created:
        print(f"Created {path}")
    print(f"Site initialised in: {root}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="layerpress", description="Layered-theme static site generator.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every visited path and template.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Compile content into the output directory.")
    build.add_argument("--config", default=DEFAULT_CONFIG, help="Path to site config file (TOML/YAML/JSON).")
    build.add_argument("--theme", default="", help="Theme name, overrides the config file.")
    build.add_argument("--content", default="", help="Directory containing source documents.")
    build.add_argument("--output", default="", help="Output directory for the site.")
    build.add_argument(
        "--drafts",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Compile documents marked as draft.",
    )
    build.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Clean output directory before build.",
    )
    build.set_defaults(func=run_build)

    init = subparsers.add_parser("init", help="Create the skeleton of a new site.")
    init.add_argument("name", help="Directory to create the site in.")
    init.add_argument("--theme", default=DEFAULT_THEME, help="Name of the starter theme.")
    init.set_defaults(func=run_init)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.func(args)
    except BuildError as exc:
        logger.critical("%s: %s", exc.path, exc.message)
        return 1
