from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """A failure that aborts the whole build."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)
        self.message = message


class MalformedDocumentError(BuildError):
    pass


class TemplateLoadError(BuildError):
    pass


class ConfigError(BuildError):
    pass


class IndexFrozenError(RuntimeError):
    pass


@dataclass(frozen=True)
class Failure:
    """A per-document failure that was logged and did not stop the build."""

    path: Path
    stage: str
    cause: str

    def log(self) -> "Failure":
        logger.error("%s failed for %s: %s", self.stage, self.path, self.cause)
        return self
