from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

from .config import Theme
from .errors import Failure, MalformedDocumentError
from .render import compile_document
from .theme import resolve_templates
from .utils import ZERO_DATE, format_date

logger = logging.getLogger(__name__)

DELIMITER = "+++"


class DocumentType(str, Enum):
    PAGE = "page"
    POST = "post"


@dataclass
class DocumentMeta:
    title: str = ""
    draft: bool = False
    date: dt.datetime = ZERO_DATE
    date_formatted: str = ""
    tags: list[str] = field(default_factory=list)
    category: str = ""
    type: DocumentType | None = None
    theme: str = ""

    @property
    def is_page(self) -> bool:
        return self.type is DocumentType.PAGE

    @property
    def is_post(self) -> bool:
        return self.type is DocumentType.POST


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    text = text.strip("-_").replace("_", "-")
    return text or "post"


def split_source(text: str, path: Path) -> tuple[str, str]:
    """Return ``(front_matter, body)`` of a ``+++`` delimited source.

    Text before the first delimiter is ignored. Everything after the second
    delimiter is the body, verbatim.
    """
    parts = text.split(DELIMITER, 2)
    if len(parts) < 3:
        raise MalformedDocumentError(path, "not enough header/body, expected two '+++' delimiters")
    return parts[1], parts[2]


def _to_datetime(value: object) -> dt.datetime | None:
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    if isinstance(value, str):
        try:
            return dt.datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def decode_meta(front_matter: str, base_directory: str, path: Path | None = None) -> DocumentMeta:
    """Decode TOML front matter into a fresh :class:`DocumentMeta`.

    Keys are matched case-insensitively. Unknown keys are ignored and missing
    or mistyped values keep their zero value. ``category`` always ends up as
    ``base_directory``.
    """
    try:
        raw = toml.loads(front_matter)
    except toml.TOMLDecodeError as exc:
        logger.warning("Invalid front matter in %s, using empty metadata: %s", path, exc)
        raw = {}
    data = {str(key).lower(): value for key, value in raw.items()}

    meta = DocumentMeta()
    if isinstance(data.get("title"), str):
        meta.title = data["title"]
    if isinstance(data.get("draft"), bool):
        meta.draft = data["draft"]
    date_value = _to_datetime(data.get("date"))
    if date_value is not None:
        meta.date = date_value
    tags = data.get("tags")
    if isinstance(tags, list):
        meta.tags = [str(tag) for tag in tags]
    type_value = data.get("type")
    if isinstance(type_value, str) and type_value:
        try:
            meta.type = DocumentType(type_value.strip().lower())
        except ValueError:
            logger.warning("Unknown document type %r in %s", type_value, path)
    if isinstance(data.get("theme"), str):
        meta.theme = data["theme"].strip()

    meta.date_formatted = format_date(meta.date)
    meta.category = base_directory
    return meta


class Document:
    """One source file under the content root."""

    def __init__(self, path: Path, content_root: Path = Path("content")) -> None:
        self.path = Path(path)
        relative_dir = self.path.parent.relative_to(content_root).as_posix()
        self.base_directory = "" if relative_dir == "." else relative_dir
        self.name = self.path.stem
        self.meta: DocumentMeta | None = None
        self.body = ""
        self.template_paths: list[Path] = []

    def __repr__(self) -> str:
        return f"Document({self.path.as_posix()!r})"

    @property
    def permalink(self) -> str:
        if not self.base_directory:
            return f"/{self.name}/"
        return f"/{self.base_directory}/{self.name}/"

    @property
    def output_path(self) -> Path:
        return Path(self.base_directory) / self.name / "index.html"

    def parse(self) -> Failure | None:
        """Read and split the source.

        Raises :class:`MalformedDocumentError` when the delimiters are missing.
        An unreadable file is returned as a :class:`Failure` and leaves
        ``meta`` unset.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return Failure(self.path, "read", str(exc)).log()
        front_matter, body = split_source(text, self.path)
        self.meta = decode_meta(front_matter, self.base_directory, self.path)
        self.body = body
        return None

    def find_theme(self, theme: Theme) -> list[Path]:
        self.template_paths = resolve_templates(self, theme)
        return self.template_paths

    def compile(self, output_dir: Path, helpers: dict | None = None) -> Failure | None:
        return compile_document(self, output_dir, helpers)
