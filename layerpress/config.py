from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "site.toml"
DEFAULT_THEME = "default"


@dataclass(frozen=True)
class Theme:
    """A named theme directory under the themes root."""

    name: str
    root: Path = Path("themes")

    @property
    def path(self) -> Path:
        return self.root / self.name

    @property
    def default_layout(self) -> Path:
        return self.path / "layout" / "default.html"

    @property
    def list_layout(self) -> Path:
        return self.path / "layout" / "list.html"

    @property
    def asset_dir(self) -> Path:
        return self.path / "asset"

    def node_path(self, name: str) -> Path:
        return self.path / "layout" / f"{name}.html"


@dataclass
class SiteConfig:
    title: str = ""
    description: str = ""
    base_url: str = "/"
    theme_name: str = DEFAULT_THEME
    content_dir: Path = Path("content")
    themes_dir: Path = Path("themes")
    output_dir: Path = Path("public")
    drafts: bool = True
    clean: bool = False
    params: dict = field(default_factory=dict)

    @property
    def theme(self) -> Theme:
        return Theme(self.theme_name, self.themes_dir)

    @classmethod
    def from_mapping(cls, data: dict, root: Path | None = None) -> "SiteConfig":
        root = root or Path(".")
        known = {"title", "description", "base_url", "theme", "content", "themes", "output", "drafts", "clean"}

        def value(key: str, default: object) -> object:
            item = data.get(key)
            return default if item is None else item

        return cls(
            title=str(value("title", "")),
            description=str(value("description", "")),
            base_url=str(value("base_url", "/")),
            theme_name=str(value("theme", DEFAULT_THEME)),
            content_dir=root / str(value("content", "content")),
            themes_dir=root / str(value("themes", "themes")),
            output_dir=root / str(value("output", "public")),
            drafts=parse_bool(value("drafts", True)),
            clean=parse_bool(value("clean", False)),
            params={key: item for key, item in data.items() if key not in known},
        )


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def load_config(path: Path) -> dict:
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(path, f"cannot read config: {exc}") from exc
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(path, f"invalid TOML: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(path, f"invalid YAML: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(path, f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(path, "config must be a mapping")
    return data


def load_site_config(path: Path) -> SiteConfig:
    """Load ``path`` and resolve directories relative to the file's folder."""
    return SiteConfig.from_mapping(load_config(path), path.parent)
