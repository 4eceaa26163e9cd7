"""
Editor host contract.

The catalog never talks to an editor directly. Everything it needs from the
outside world (file access, feature flags, the active document and selections,
the interactive picker and edit application) goes through ``EditorHost``.
``WorkspaceHost`` is a filesystem-backed implementation used by the
command-line tool and the tests.
"""

from __future__ import annotations

import inspect
import logging
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence, Union

from core.settings import CatalogSettings
from extraction.extractor import discover_tex_files, read_text_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentSnapshot:
    """Text and path of the focused document."""

    text: str
    path: str


@dataclass(frozen=True)
class SelectionRange:
    """One selected range of the active editor, with its current text.

    Offsets are character offsets into the document text.
    """

    start: int
    end: int
    text: str = ""


class EditorHost(Protocol):
    """Collaborator interface consumed by the catalog and the surround command."""

    def read_file(self, path: str) -> str: ...

    def file_exists(self, path: str) -> bool: ...

    def get_config(self, key: str) -> Any: ...

    def current_document(self) -> Optional[DocumentSnapshot]: ...

    def relevant_file_set(self) -> Sequence[str]: ...

    def selections(self) -> Optional[Sequence[SelectionRange]]: ...

    async def present_choice(self, items: Sequence[str], placeholder: str) -> Optional[str]: ...

    def apply_edits(self, ranges: Sequence[SelectionRange], texts: Sequence[str]) -> None: ...


Picker = Callable[[Sequence[str], str], Union[Optional[str], Awaitable[Optional[str]]]]


class WorkspaceHost:
    """EditorHost backed by a directory of TeX files.

    Args:
        root: Project directory; its TeX files form the relevant file set.
        settings: Feature flags answered by ``get_config``.
        active_file: Path of the document treated as focused, if any.
        picker: Callable (sync or async) choosing one of the offered items.
            Without a picker every choice is dismissed.
    """

    def __init__(
        self,
        root: Optional[str] = None,
        settings: Optional[CatalogSettings] = None,
        active_file: Optional[str] = None,
        picker: Optional[Picker] = None,
    ):
        self.root = os.path.abspath(root) if root else None
        self.settings = settings or CatalogSettings()
        self.active_file = os.path.abspath(active_file) if active_file else None
        self.active_selections: list[SelectionRange] = []
        self.picker = picker
        self.applied_edits: list[tuple[list[SelectionRange], list[str]]] = []

    def read_file(self, path: str) -> str:
        return read_text_file(path)

    def file_exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def get_config(self, key: str) -> Any:
        return self.settings.get(key)

    def current_document(self) -> Optional[DocumentSnapshot]:
        if self.active_file is None or not self.file_exists(self.active_file):
            return None
        return DocumentSnapshot(text=self.read_file(self.active_file), path=self.active_file)

    def relevant_file_set(self) -> list[str]:
        if self.root is None:
            return []
        return discover_tex_files(self.root)

    def selections(self) -> Optional[list[SelectionRange]]:
        if self.active_file is None:
            return None
        return list(self.active_selections)

    async def present_choice(self, items: Sequence[str], placeholder: str) -> Optional[str]:
        if self.picker is None:
            logger.debug("No picker configured; dismissing choice of %d items", len(items))
            return None
        choice = self.picker(items, placeholder)
        if inspect.isawaitable(choice):
            choice = await choice
        return choice

    def apply_edits(self, ranges: Sequence[SelectionRange], texts: Sequence[str]) -> None:
        self.applied_edits.append((list(ranges), list(texts)))
        logger.info("Applied %d replacements", len(texts))
