"""Main scaffolding orchestrator.

Takes a ``GenerationRequest`` and a resolved application name, builds the
generation manifest (every directory and file the new Express project
needs), materializes it through the ``FileSystemWriter``, and prints the
next-step instructions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.console import Console

from apigen.config import GeneratorConfig
from apigen.models import EntryKind, GenerationRequest, ManifestEntry, TemplateDescriptor
from apigen.utils import console as default_console
from apigen.utils import launched_from_cmd

from .templates import TemplateRenderer
from .writer import FileSystemWriter

# ---------------------------------------------------------------------------
# Static assets (template asset name -> output path)
# ---------------------------------------------------------------------------

STATIC_SOURCES: dict[str, str] = {
    "app.js": "app.js",
    "routes.js": "routes.js",
}

GITIGNORE_SOURCE = ("gitignore", ".gitignore")
DOCKERFILE_SOURCE = ("Dockerfile", "Dockerfile")

EXECUTABLE_TARGETS = frozenset({"bin/www"})


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Main scaffolding orchestrator.

    Given a ``GenerationRequest``, generates an Express API starter containing:
    - ``app.js`` and ``routes.js`` (copied verbatim)
    - ``bin/www`` launch script (rendered, executable)
    - ``config.js`` configuration stub (rendered)
    - ``package.json`` with sorted dependencies
    - empty ``controllers/`` and ``middlewares/`` directories
    - optionally ``.gitignore`` and ``Dockerfile``
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        renderer: TemplateRenderer | None = None,
        writer: FileSystemWriter | None = None,
        console: Console | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.console = console or default_console
        self.renderer = renderer or TemplateRenderer(self.config.template_dir)
        self.writer = writer or FileSystemWriter(self.console)

    # -- Public API --------------------------------------------------------

    async def generate(self, request: GenerationRequest, app_name: str) -> list[Path]:
        """Generate the project described by *request*.

        The manifest is built (and every template rendered) before anything
        touches the destination, so a broken asset never leaves a
        half-written project behind.

        Returns:
            The created paths, in creation order.
        """
        manifest = self.build_manifest(request, app_name)

        self.console.print()
        created = await self.writer.materialize(request.destination_path, manifest)

        self.print_instructions(request.destination_path, app_name)
        return created

    def build_manifest(self, request: GenerationRequest, app_name: str) -> list[ManifestEntry]:
        """Return the ordered list of entries a run must create.

        Pure with respect to the destination: the same request and name
        always produce the same manifest, whatever the directory holds.
        """
        cfg = self.config
        entries: list[ManifestEntry] = []

        if not _is_current_dir(request.destination_path):
            entries.append(_directory(".", cfg.dir_mode))

        for source, target in STATIC_SOURCES.items():
            entries.append(_file(target, self.renderer.read_static(source), cfg.file_mode))

        for subdir in cfg.subdirectories:
            entries.append(_directory(subdir, cfg.dir_mode))

        for descriptor in self.template_descriptors(app_name):
            mode = cfg.exec_mode if descriptor.target_path in EXECUTABLE_TARGETS else cfg.file_mode
            entries.append(
                _file(descriptor.target_path, self.renderer.render_descriptor(descriptor), mode)
            )

        entries.append(_file("package.json", self.build_package(app_name), cfg.file_mode))

        if request.include_gitignore:
            source, target = GITIGNORE_SOURCE
            entries.append(_file(target, self.renderer.read_static(source), cfg.file_mode))

        if request.include_dockerfile:
            source, target = DOCKERFILE_SOURCE
            entries.append(_file(target, self.renderer.read_static(source), cfg.file_mode))

        return entries

    def template_descriptors(self, app_name: str) -> list[TemplateDescriptor]:
        """Describe the rendered files; each gets its own copy of the context."""
        return [
            TemplateDescriptor(source_name="www", target_path="bin/www", context={"name": app_name}),
            TemplateDescriptor(
                source_name="config.js", target_path="config.js", context={"name": app_name}
            ),
        ]

    def build_package(self, app_name: str) -> dict[str, Any]:
        """Build the ``package.json`` document.

        Dependencies are sorted by name, as npm(1) writes them.
        """
        return {
            "name": app_name,
            "version": self.config.package_version,
            "private": True,
            "scripts": {"start": self.config.start_script},
            "dependencies": dict(sorted(self.config.dependencies.items())),
        }

    # -- Instructions ------------------------------------------------------

    def print_instructions(
        self,
        destination: str,
        app_name: str,
        from_cmd: bool | None = None,
    ) -> None:
        """Print the change-directory, install and run hints."""
        if from_cmd is None:
            from_cmd = launched_from_cmd()
        prompt = ">" if from_cmd else "$"

        lines: list[str] = []
        if not _is_current_dir(destination):
            lines += ["", "   change directory:", f"     {prompt} cd {destination}"]

        lines += ["", "   install dependencies:", f"     {prompt} npm install"]
        lines += ["", "   run the app:"]
        if from_cmd:
            lines.append(f"     {prompt} SET DEBUG={app_name}:* & npm start")
        else:
            lines.append(f"     {prompt} DEBUG={app_name}:* npm start")
        lines.append("")

        # Printed verbatim: no wrapping, markup or emoji.
        for line in lines:
            self.console.print(line, markup=False, soft_wrap=True)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _is_current_dir(path: str) -> bool:
    return Path(path) == Path(".")


def _directory(path: str, mode: int) -> ManifestEntry:
    return ManifestEntry(path=path, mode=mode, kind=EntryKind.DIRECTORY)


def _file(path: str, content: str | dict[str, Any], mode: int) -> ManifestEntry:
    return ManifestEntry(path=path, mode=mode, kind=EntryKind.FILE, content=content)
