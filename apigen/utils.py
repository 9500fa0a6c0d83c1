"""Shared utility functions for apigen.

Provides the Rich consoles used for all operator-facing output, the
application-name resolver, and small platform helpers.
"""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Mapping
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from apigen.config import DEFAULT_APP_NAME

console = Console(highlight=False, emoji=False)
err_console = Console(stderr=True, highlight=False, emoji=False)

# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9.-]+")
_NAME_EDGES = re.compile(r"^[-_.]+|-+$")


def resolve_app_name(path: str | Path, default: str = DEFAULT_APP_NAME) -> str:
    """Create an app name from a directory path, fitting npm naming requirements.

    * Takes the final path segment.
    * Replaces every run of characters outside ``[A-Za-z0-9.-]`` with ``-``.
    * Strips leading ``-``, ``_``, ``.`` and trailing ``-``, then lowercases.
    * Falls back to *default* when nothing usable is left.

    Examples::

        resolve_app_name("/home/me/My App!!") -> "my-app"
        resolve_app_name("___.hidden-")       -> "hidden"
        resolve_app_name("")                  -> "hello-world-api"
    """
    name = _INVALID_NAME_CHARS.sub("-", Path(path).name)
    name = _NAME_EDGES.sub("", name).lower()
    return name or default


# ---------------------------------------------------------------------------
# Platform helpers
# ---------------------------------------------------------------------------


def launched_from_cmd(
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> bool:
    """Return ``True`` when running under Windows ``cmd.exe``.

    POSIX-like shells on Windows (Git Bash, MSYS) export ``_``; cmd.exe does not.
    """
    platform = sys.platform if platform is None else platform
    environ = os.environ if environ is None else environ
    return platform == "win32" and "_" not in environ


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_created(path: str | Path, target: Console | None = None) -> None:
    """Report a created file or directory (``   create : <path>``)."""
    (target or console).print(f"   [cyan]create[/cyan] : {escape(str(path))}", soft_wrap=True)


def print_error(message: str, target: Console | None = None) -> None:
    """Print a red error message on the diagnostic console."""
    (target or err_console).print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)


def print_warning(message: str, target: Console | None = None) -> None:
    """Print a commander-style warning block on the diagnostic console."""
    out = target or err_console
    out.print()
    for line in message.split("\n"):
        out.print(f"  [bold yellow]warning:[/bold yellow] {escape(line)}", soft_wrap=True)
    out.print()


def warn_renamed_option(original_name: str, new_name: str, target: Console | None = None) -> None:
    """Warn that a command-line option has been renamed."""
    print_warning(f"option `{original_name}' has been renamed to `{new_name}'", target)
