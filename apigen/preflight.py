"""Pre-flight inspection of the destination directory."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from apigen.errors import PreflightReadError
from apigen.models import DirectoryState


async def check_directory(path: str | Path) -> DirectoryState:
    """Classify *path* as empty, non-empty or missing.

    The listing runs in a worker thread. A nonexistent directory is reported
    as :attr:`DirectoryState.MISSING` (generation will create it); any other
    read failure raises :class:`PreflightReadError`.
    """
    try:
        entries = await asyncio.to_thread(os.listdir, path)
    except FileNotFoundError:
        return DirectoryState.MISSING
    except OSError as exc:
        raise PreflightReadError(path, exc.strerror or str(exc)) from exc

    return DirectoryState.NON_EMPTY if entries else DirectoryState.EMPTY
