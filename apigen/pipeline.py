"""apigen generation pipeline.

Sequences one run of the generator:

1. Resolve the application name from the destination path.
2. Inspect the destination directory.
3. Ask for confirmation when it is not empty (unless forced).
4. Build and materialize the manifest, then print next steps.
5. Hand the exit status to the shutdown sequence.

All fatal conditions surface here as :class:`~apigen.errors.GeneratorError`
subclasses; each is reported on the diagnostic console before shutdown.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path

from rich.console import Console

from apigen.config import GeneratorConfig
from apigen.errors import AbortedByOperator, GeneratorError
from apigen.models import GenerationRequest
from apigen.preflight import check_directory
from apigen.prompt import Prompter
from apigen.scaffolder.generator import ProjectGenerator
from apigen.utils import console as default_console
from apigen.utils import err_console as default_err_console
from apigen.utils import print_error, resolve_app_name

ShutdownFn = Callable[[int], Awaitable[None]]


class GenerationPipeline:
    """Drives a single generation run and reports its outcome.

    Attributes:
        config: Generator settings.
        prompter: Confirmation gate used for non-empty destinations.
        shutdown: Coroutine function that drains output and exits.
        generator: The project generator doing the actual work.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        *,
        prompter: Prompter,
        shutdown: ShutdownFn,
        generator: ProjectGenerator | None = None,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.config = config
        self.prompter = prompter
        self.shutdown = shutdown
        self.console = console or default_console
        self.err_console = err_console or default_err_console
        self.generator = generator or ProjectGenerator(config, console=self.console)

    async def run(self, request: GenerationRequest) -> int:
        """Execute the pipeline and shut down with the resulting exit code.

        Returns:
            ``0`` on success, ``1`` when the operator aborted or any step failed.
        """
        app_name = resolve_app_name(
            Path(request.destination_path).resolve(), self.config.default_app_name
        )

        code = 0
        try:
            await self._generate(request, app_name)
        except AbortedByOperator:
            self.err_console.print("aborting", markup=False, soft_wrap=True)
            code = 1
        except GeneratorError as exc:
            print_error(str(exc), self.err_console)
            code = 1

        await self.shutdown(code)
        return code

    async def _generate(self, request: GenerationRequest, app_name: str) -> None:
        state = await check_directory(request.destination_path)

        if not state.is_empty and not request.force_overwrite:
            confirmed = await self.prompter.ask(self.config.confirm_question)
            if not confirmed:
                raise AbortedByOperator()

        await self.generator.generate(request, app_name)
