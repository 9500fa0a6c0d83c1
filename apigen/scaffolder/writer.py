"""Filesystem materialization of a generation manifest.

Each filesystem call runs in a worker thread and is awaited before the
next one starts, so entries are created strictly in manifest order and a
directory always exists before the files inside it are written. Nothing
is rolled back on failure: re-running the generator over a partially
populated directory is safe because every entry is overwritten.
"""

from __future__ import annotations

import asyncio
import json
import os
import stat
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rich.console import Console

from apigen.config import MODE_0666, MODE_0755
from apigen.errors import WriteError
from apigen.models import ManifestEntry
from apigen.utils import console as default_console
from apigen.utils import print_created


class FileSystemWriter:
    """Creates directories and files, reporting every creation on *console*."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    async def ensure_directory(self, path: str | Path, mode: int = MODE_0755) -> Path:
        """Recursively create *path*; a no-op (apart from the report) if it exists."""
        target = Path(path)
        try:
            await asyncio.to_thread(target.mkdir, mode=mode, parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(target, exc.strerror or str(exc)) from exc
        print_created(f"{target}{os.sep}", self.console)
        return target

    async def write_file(
        self,
        path: str | Path,
        content: str | dict[str, Any],
        mode: int = MODE_0666,
    ) -> Path:
        """Write *content* to *path*, replacing any existing file.

        A ``dict`` is written as indented JSON with a trailing newline.
        """
        target = Path(path)
        data = serialize_content(content)
        try:
            await asyncio.to_thread(_write_file, target, data, mode)
        except OSError as exc:
            raise WriteError(target, exc.strerror or str(exc)) from exc
        print_created(target, self.console)
        return target

    async def materialize(self, root: str | Path, manifest: Iterable[ManifestEntry]) -> list[Path]:
        """Create every manifest entry under *root*, in order.

        Returns:
            The created paths, in creation order.
        """
        created: list[Path] = []
        for entry in manifest:
            target = Path(os.path.normpath(os.path.join(root, entry.path)))
            if entry.is_directory:
                created.append(await self.ensure_directory(target, entry.mode))
            else:
                content = entry.content if entry.content is not None else ""
                created.append(await self.write_file(target, content, entry.mode))
        return created


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def serialize_content(content: str | dict[str, Any]) -> str:
    """Return the on-disk text for a manifest entry's content."""
    if isinstance(content, dict):
        return json.dumps(content, indent=2, ensure_ascii=False) + "\n"
    return content


def _write_file(path: Path, data: str, mode: int) -> None:
    """Synchronous helper: write *data* with *mode* applied on creation."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
        fh.write(data)
    if mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
        _make_executable(path)


def _make_executable(path: Path) -> None:
    """Set the executable bit on a file (covers files that already existed)."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
