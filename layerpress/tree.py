from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .config import SiteConfig
from .content import Document
from .errors import BuildError, Failure, IndexFrozenError
from .helpers import template_helpers

logger = logging.getLogger(__name__)

DIR = "dir"
FILE = "file"


class SiteIndex:
    """Documents grouped by base directory, in walk order.

    Writable while the content tree is walked, read-only once frozen.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[Document]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "SiteIndex":
        self._frozen = True
        return self

    def _check_writable(self) -> None:
        if self._frozen:
            raise IndexFrozenError("site index is read-only after the walk")

    def ensure(self, directory: str) -> list[Document]:
        self._check_writable()
        return self._entries.setdefault(directory, [])

    def add(self, document: Document) -> None:
        self.ensure(document.base_directory).append(document)

    def directories(self) -> list[str]:
        return list(self._entries)

    def documents(self, directory: str) -> list[Document]:
        return list(self._entries.get(directory, []))

    def all_documents(self) -> list[Document]:
        return [doc for docs in self._entries.values() for doc in docs]

    def items(self) -> Iterator[tuple[str, list[Document]]]:
        for directory, docs in self._entries.items():
            yield directory, list(docs)

    def __contains__(self, directory: str) -> bool:
        return directory in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class TreeNode:
    name: str
    kind: str
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    document: Document | None = None


class SiteTree:
    """Arena of :class:`TreeNode` addressed by integer index; 0 is the root."""

    def __init__(self, root_name: str = "") -> None:
        self.nodes: list[TreeNode] = [TreeNode(root_name, DIR)]

    def add(self, parent: int, name: str, kind: str, document: Document | None = None) -> int:
        self.nodes.append(TreeNode(name, kind, parent=parent, document=document))
        index = len(self.nodes) - 1
        self.nodes[parent].children.append(index)
        return index

    def children(self, index: int) -> list[TreeNode]:
        return [self.nodes[child] for child in self.nodes[index].children]

    def path(self, index: int) -> str:
        parts = []
        while index:
            node = self.nodes[index]
            parts.append(node.name)
            index = node.parent
        return "/".join(reversed(parts))

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass
class BuildResult:
    index: SiteIndex
    tree: SiteTree
    failures: list[Failure] = field(default_factory=list)


def walk(root: Path) -> Iterator[Path]:
    """Yield ``root`` and everything below it, depth first in lexical order."""
    yield root
    if not root.is_dir():
        return
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.name.startswith("."):
            continue
        if entry.is_symlink() and entry.is_dir():
            logger.debug("Not following symlinked directory %s", entry)
            continue
        yield from walk(entry)


def _relative_key(path: Path, content_root: Path) -> str:
    key = path.relative_to(content_root).as_posix()
    return "" if key == "." else key


def build_site_tree(config: SiteConfig, helpers: dict | None = None) -> BuildResult:
    """Parse, theme and compile every document under the content root.

    Malformed documents and broken templates raise and end the build.
    Unreadable sources and unwritable outputs are recorded as failures and
    left out of the index.
    """
    content_root = config.content_dir
    if not content_root.is_dir():
        raise BuildError(content_root, "content directory not found")
    if helpers is None:
        helpers = template_helpers(config)
    theme = config.theme

    index = SiteIndex()
    tree = SiteTree(content_root.name)
    result = BuildResult(index, tree)
    node_ids = {content_root: 0}

    for path in walk(content_root):
        logger.debug("Visited %s", path)
        if path.is_dir():
            index.ensure(_relative_key(path, content_root))
            if path != content_root:
                node_ids[path] = tree.add(node_ids[path.parent], path.name, DIR)
            continue

        document = Document(path, content_root)
        failure = document.parse()
        if failure is not None:
            result.failures.append(failure)
            continue
        if document.meta.draft and not config.drafts:
            logger.info("Skipping draft %s", path)
            continue
        document.find_theme(theme)
        failure = document.compile(config.output_dir, helpers)
        if failure is not None:
            result.failures.append(failure)
            if failure.stage != "render":
                continue
        index.add(document)
        tree.add(node_ids[path.parent], path.name, FILE, document)

    index.freeze()
    logger.info(
        "Walked %s: %d document(s) in %d director(ies), %d failure(s)",
        content_root,
        len(index.all_documents()),
        len(index),
        len(result.failures),
    )
    return result
