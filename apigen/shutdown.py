"""Graceful process shutdown for buffered console output.

Report lines and the final exit can race when output is buffered (pipes,
redirected files). :class:`ShutdownSequencer` flushes every registered
stream, waits for all flushes to complete, and only then terminates the
process with the requested status code.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable, Sequence
from enum import Enum
from typing import IO, Any


class ShutdownState(str, Enum):
    """Lifecycle of a :class:`ShutdownSequencer`."""
    RUNNING = "running"
    DRAINING = "draining"
    EXITED = "exited"


class ShutdownSequencer:
    """Drains output streams, then exits.

    Only the first :meth:`shutdown` call has any effect; later calls (even
    while the first is still draining) return immediately.

    Attributes:
        streams: Buffered streams flushed before termination.
        terminate: Process-termination primitive, ``sys.exit`` by default.
        state: Current lifecycle state.
        exit_code: Status passed to the first shutdown request, if any.
    """

    def __init__(
        self,
        streams: Sequence[IO[Any]] | None = None,
        terminate: Callable[[int], Any] | None = None,
    ) -> None:
        self.streams = list(streams) if streams is not None else [sys.stdout, sys.stderr]
        self.terminate = terminate or sys.exit
        self.state = ShutdownState.RUNNING
        self.exit_code: int | None = None

    @property
    def exited(self) -> bool:
        """``True`` once an exit has been requested."""
        return self.state is not ShutdownState.RUNNING

    async def shutdown(self, code: int) -> None:
        """Flush every stream and terminate with *code*."""
        if self.state is not ShutdownState.RUNNING:
            return

        self.state = ShutdownState.DRAINING
        self.exit_code = code

        await asyncio.gather(*(self._drain(stream) for stream in self.streams))

        self.state = ShutdownState.EXITED
        self.terminate(code)

    @staticmethod
    async def _drain(stream: IO[Any]) -> None:
        try:
            await asyncio.to_thread(stream.flush)
        except (OSError, ValueError):
            # Closed or broken stream: nothing left to deliver.
            pass
