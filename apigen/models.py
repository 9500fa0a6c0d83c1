"""Pydantic v2 models shared by the generation pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class DirectoryState(str, Enum):
    """State of the destination directory before generation."""
    EMPTY = "empty"
    NON_EMPTY = "non_empty"
    MISSING = "missing"

    @property
    def is_empty(self) -> bool:
        """A missing directory counts as empty; generation creates it."""
        return self is not DirectoryState.NON_EMPTY


class EntryKind(str, Enum):
    """Kind of a manifest entry."""
    DIRECTORY = "directory"
    FILE = "file"


# ---------------------------------------------------------------------------
# Request & manifest models
# ---------------------------------------------------------------------------

class GenerationRequest(BaseModel):
    """Validated options for one generation run."""

    model_config = ConfigDict(frozen=True)

    destination_path: str = Field(default=".")
    force_overwrite: bool = Field(default=False)
    include_gitignore: bool = Field(default=False)
    include_dockerfile: bool = Field(default=False)


class TemplateDescriptor(BaseModel):
    """One unit of rendering: template source, output path and context."""

    source_name: str
    target_path: str
    context: dict[str, Any] = Field(default_factory=dict)


class ManifestEntry(BaseModel):
    """A directory or file that must exist after a successful run.

    ``path`` is relative to the destination, in posix form. ``content`` is
    text, a structured JSON document (``dict``), or ``None`` for directories.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    mode: int
    kind: EntryKind = EntryKind.FILE
    content: Optional[Union[str, dict[str, Any]]] = None

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY
