"""Command-line entry point for ``apigen`` / ``python -m apigen``.

Turns ``argv`` into a validated :class:`~apigen.models.GenerationRequest`,
runs the generation pipeline and exits through the shutdown sequence so
that no report line is lost.

Examples::

    apigen
    apigen my-api --git --docker
    apigen existing-dir --force
"""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass, field
from typing import NoReturn, Sequence

from pydantic import ValidationError
from rich.console import Console

from apigen import __version__
from apigen.config import GeneratorConfig
from apigen.models import GenerationRequest
from apigen.pipeline import GenerationPipeline
from apigen.prompt import ConsolePrompter, Prompter
from apigen.shutdown import ShutdownSequencer
from apigen.utils import console as default_console
from apigen.utils import err_console as default_err_console
from apigen.utils import print_error, warn_renamed_option

PROG = "apigen"


class UsageError(Exception):
    """Raised for malformed command lines."""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting, so exit codes stay ours."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


# ---------------------------------------------------------------------------
# Parser state
# ---------------------------------------------------------------------------


@dataclass
class OptionParserState:
    """Tracks help display so an unknown option prints help only once."""

    help_shown: bool = False
    allow_unknown_option: bool = False


@dataclass
class CliOptions:
    """Result of parsing the command line."""

    request: GenerationRequest = field(default_factory=GenerationRequest)
    show_help: bool = False
    show_version: bool = False


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        usage="%(prog)s [options] [dir]",
        description="Generate an Express API project skeleton",
        add_help=False,
    )
    parser.add_argument("dir", nargs="?", default=".", help="destination directory (default: .)")
    parser.add_argument("--version", action="store_true", help="output the version number")
    parser.add_argument("--git", action="store_true", help="add .gitignore")
    parser.add_argument("--gitignore", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--docker", action="store_true", help="add Dockerfile")
    parser.add_argument("-f", "--force", action="store_true", help="force on non-empty directory")
    parser.add_argument("-h", "--help", action="store_true", help="output usage information")
    return parser


class CommandLine:
    """Parses ``argv`` and owns the help/unknown-option bookkeeping."""

    def __init__(self, console: Console | None = None, err_console: Console | None = None) -> None:
        self.console = console or default_console
        self.err_console = err_console or default_err_console
        self.parser = build_parser()
        self.state = OptionParserState()

    def output_help(self) -> None:
        self.console.print(self.parser.format_help(), markup=False, end="", soft_wrap=True)
        self.state.help_shown = True

    def unknown_option(self, flag: str) -> None:
        """Handle an unrecognised flag.

        Help is shown the first time. The flag is tolerated only if help had
        already been shown before it was seen.
        """
        self.state.allow_unknown_option = self.state.help_shown
        if not self.state.help_shown:
            self.output_help()
        if not self.state.allow_unknown_option:
            raise UsageError(f"unknown option `{flag}'")

    def parse(self, argv: Sequence[str] | None) -> CliOptions:
        try:
            args, extras = self.parser.parse_known_args(argv)
        except UsageError:
            if not self.state.help_shown:
                self.output_help()
            raise

        for extra in extras:
            if extra.startswith("-") and extra != "-":
                self.unknown_option(extra)

        if args.gitignore:
            warn_renamed_option("--gitignore", "--git", self.err_console)

        request = GenerationRequest(
            destination_path=args.dir,
            force_overwrite=args.force,
            include_gitignore=args.git or args.gitignore,
            include_dockerfile=args.docker,
        )
        return CliOptions(request=request, show_help=args.help, show_version=args.version)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


async def run(
    argv: Sequence[str] | None,
    sequencer: ShutdownSequencer,
    *,
    config: GeneratorConfig | None = None,
    prompter: Prompter | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Parse *argv*, run the generator and shut down through *sequencer*."""
    out = console or default_console
    err = err_console or default_err_console
    cli = CommandLine(out, err)

    try:
        options = cli.parse(argv)
    except UsageError as exc:
        err.print(f"error: {exc}", markup=False, soft_wrap=True)
        await sequencer.shutdown(1)
        return 1

    if options.show_help:
        if not cli.state.help_shown:
            cli.output_help()
        await sequencer.shutdown(0)
        return 0

    if options.show_version:
        out.print(__version__, markup=False, soft_wrap=True)
        await sequencer.shutdown(0)
        return 0

    try:
        config = config or GeneratorConfig.from_env()
    except ValidationError as exc:
        print_error(f"invalid configuration: {exc}", err)
        await sequencer.shutdown(1)
        return 1

    pipeline = GenerationPipeline(
        config,
        prompter=prompter or ConsolePrompter(out),
        shutdown=sequencer.shutdown,
        console=out,
        err_console=err,
    )
    return await pipeline.run(options.request)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``apigen``."""
    asyncio.run(run(argv, ShutdownSequencer()))


if __name__ == "__main__":
    main()
