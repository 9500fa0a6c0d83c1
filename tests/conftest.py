"""Shared pytest fixtures for the apigen test suite.

Provides reusable fixtures for:
- Captured Rich consoles (stdout / stderr doubles)
- A canned-answer prompter
- A shutdown sequencer that records instead of exiting
- A generator config pointing at the bundled templates
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from apigen.config import GeneratorConfig
from apigen.shutdown import ShutdownSequencer


# ---------------------------------------------------------------------------
# Consoles
# ---------------------------------------------------------------------------


def make_console(width: int = 200) -> Console:
    """A colourless console writing into a StringIO buffer."""
    return Console(file=io.StringIO(), width=width, highlight=False, color_system=None, emoji=False)


@pytest.fixture
def out_console() -> Console:
    return make_console()


@pytest.fixture
def err_console() -> Console:
    return make_console()


@pytest.fixture
def narrow_console() -> Console:
    """Same width Rich falls back to when stdout is not a terminal."""
    return make_console(width=80)


# ---------------------------------------------------------------------------
# Prompting & shutdown doubles
# ---------------------------------------------------------------------------


class FakePrompter:
    """Answers every question with a fixed response and records the questions."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.questions: list[str] = []

    async def ask(self, question: str) -> bool:
        self.questions.append(question)
        return self.answer


@pytest.fixture
def yes_prompter() -> FakePrompter:
    return FakePrompter(True)


@pytest.fixture
def no_prompter() -> FakePrompter:
    return FakePrompter(False)


class RecordingStream:
    """A stream double whose flushes are recorded."""

    def __init__(self, name: str, log: list[str]) -> None:
        self.name = name
        self.log = log

    def flush(self) -> None:
        self.log.append(f"flush:{self.name}")


@pytest.fixture
def shutdown_log() -> list[str]:
    return []


@pytest.fixture
def sequencer(shutdown_log: list[str]) -> ShutdownSequencer:
    """A ShutdownSequencer that records flushes and exit codes instead of exiting."""
    streams = [RecordingStream("stdout", shutdown_log), RecordingStream("stderr", shutdown_log)]
    return ShutdownSequencer(
        streams=streams,
        terminate=lambda code: shutdown_log.append(f"exit:{code}"),
    )


# ---------------------------------------------------------------------------
# Config & paths
# ---------------------------------------------------------------------------


@pytest.fixture
def generator_config() -> GeneratorConfig:
    return GeneratorConfig()


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """A destination path inside tmp_path that does not exist yet."""
    return tmp_path / "my-api"
