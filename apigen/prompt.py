"""Interactive yes/no confirmation gate."""

from __future__ import annotations

import asyncio
import re
import threading
from typing import Protocol

from rich.console import Console

from apigen.utils import console as default_console

_AFFIRMATIVE = re.compile(r"^(?:y|yes|ok|true)$", re.IGNORECASE)

PROMPT_THREAD_NAME = "apigen-prompt"


def is_affirmative(answer: str) -> bool:
    """Return ``True`` for ``y``, ``yes``, ``ok`` or ``true`` (any case).

    The ``[y/N]`` hint shown to the operator lists fewer answers than are
    accepted here.
    """
    return bool(_AFFIRMATIVE.match(answer.strip()))


class Prompter(Protocol):
    """Anything that can ask the operator a yes/no question."""

    async def ask(self, question: str) -> bool: ...


class ConsolePrompter:
    """Asks on stdout through Rich and reads one line from stdin.

    Waits indefinitely for an answer; end-of-input counts as "no". The line
    is read on a daemon thread rather than the loop's default executor, so
    an interrupted prompt never holds up interpreter exit.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    async def ask(self, question: str) -> bool:
        loop = asyncio.get_running_loop()
        answer: asyncio.Future[str] = loop.create_future()

        def read() -> None:
            try:
                line = self.console.input(question, markup=False)
            except Exception as exc:
                _deliver(loop, answer, error=exc)
            else:
                _deliver(loop, answer, result=line)

        threading.Thread(target=read, name=PROMPT_THREAD_NAME, daemon=True).start()

        try:
            line = await answer
        except EOFError:
            self.console.print()
            return False
        return is_affirmative(line)


def _deliver(
    loop: asyncio.AbstractEventLoop,
    future: asyncio.Future[str],
    result: str | None = None,
    error: BaseException | None = None,
) -> None:
    """Settle *future* from the reader thread unless it was already cancelled."""

    def settle() -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    try:
        loop.call_soon_threadsafe(settle)
    except RuntimeError:
        # Loop already closed: the prompt was abandoned.
        return
