"""Exceptions raised by the generation pipeline.

Every fatal condition derives from :class:`GeneratorError` so the pipeline
can catch it at a single point, print the message on the diagnostic console
and hand exit status ``1`` to the shutdown sequence.
"""

from __future__ import annotations

from pathlib import Path


class GeneratorError(Exception):
    """Base class for all apigen failures."""


class PreflightReadError(GeneratorError):
    """Raised when the destination directory cannot be listed.

    A nonexistent destination is *not* an error; this covers permission
    problems, a file in place of the directory, and similar conditions.
    """

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read destination {self.path}: {reason}")


class TemplateAssetError(GeneratorError):
    """Raised when a bundled template or static asset is missing or unreadable."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Template asset {name!r} unavailable: {reason}")


class WriteError(GeneratorError):
    """Raised when a file or directory cannot be created."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")


class AbortedByOperator(GeneratorError):
    """Raised when the operator declines to generate into a non-empty directory."""

    def __init__(self) -> None:
        super().__init__("aborting")
