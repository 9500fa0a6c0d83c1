"""Tests for the project scaffolding generator.

Covers:
- Manifest contents and ordering
- Determinism of the manifest
- git / docker feature flags adding exactly one entry each
- package.json construction and dependency ordering
- Full generation on disk
- Next-step instructions for POSIX shells and cmd.exe
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from apigen.config import GeneratorConfig
from apigen.errors import TemplateAssetError
from apigen.models import EntryKind, GenerationRequest
from apigen.scaffolder.generator import ProjectGenerator
from apigen.scaffolder.templates import TemplateRenderer
from apigen.scaffolder.writer import FileSystemWriter

# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def generator(out_console) -> ProjectGenerator:
    return ProjectGenerator(GeneratorConfig(), console=out_console)


def _paths(manifest) -> list[str]:
    return [entry.path for entry in manifest]


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class TestBuildManifest:
    def test_default_layout(self, generator):
        manifest = generator.build_manifest(GenerationRequest(destination_path="my-api"), "my-api")
        assert _paths(manifest) == [
            ".",
            "app.js",
            "routes.js",
            "bin",
            "controllers",
            "middlewares",
            "bin/www",
            "config.js",
            "package.json",
        ]

    def test_current_dir_has_no_root_entry(self, generator):
        manifest = generator.build_manifest(GenerationRequest(destination_path="."), "x")
        assert "." not in _paths(manifest)
        assert _paths(manifest)[0] == "app.js"

    def test_directories_precede_their_files(self, generator):
        paths = _paths(generator.build_manifest(GenerationRequest(destination_path="out"), "x"))
        assert paths.index("bin") < paths.index("bin/www")

    def test_entry_kinds_and_modes(self, generator):
        manifest = generator.build_manifest(GenerationRequest(destination_path="out"), "x")
        by_path = {entry.path: entry for entry in manifest}
        assert by_path["bin"].kind is EntryKind.DIRECTORY
        assert by_path["bin"].mode == 0o755
        assert by_path["bin/www"].mode == 0o755
        assert by_path["config.js"].mode == 0o666
        assert by_path["app.js"].mode == 0o666
        assert by_path["bin"].content is None

    def test_rendered_content_uses_name(self, generator):
        manifest = generator.build_manifest(GenerationRequest(destination_path="out"), "orders")
        by_path = {entry.path: entry for entry in manifest}
        assert "'orders:server'" in by_path["bin/www"].content
        assert "name: 'orders'" in by_path["config.js"].content
        assert by_path["package.json"].content["name"] == "orders"

    def test_static_content_is_verbatim(self, generator):
        manifest = generator.build_manifest(GenerationRequest(destination_path="out"), "x")
        by_path = {entry.path: entry for entry in manifest}
        assert by_path["app.js"].content == generator.renderer.read_static("app.js")
        assert by_path["routes.js"].content == generator.renderer.read_static("routes.js")

    def test_deterministic(self, generator):
        request = GenerationRequest(destination_path="svc", include_gitignore=True, include_dockerfile=True)
        first = generator.build_manifest(request, "svc")
        second = ProjectGenerator(GeneratorConfig()).build_manifest(request, "svc")
        assert first == second

    @pytest.mark.parametrize("docker", [False, True])
    def test_git_adds_exactly_one_entry(self, generator, docker):
        base = generator.build_manifest(
            GenerationRequest(destination_path="out", include_dockerfile=docker), "x"
        )
        with_git = generator.build_manifest(
            GenerationRequest(destination_path="out", include_gitignore=True, include_dockerfile=docker), "x"
        )
        assert len(with_git) == len(base) + 1
        assert set(_paths(with_git)) - set(_paths(base)) == {".gitignore"}

    @pytest.mark.parametrize("git", [False, True])
    def test_docker_adds_exactly_one_entry(self, generator, git):
        base = generator.build_manifest(
            GenerationRequest(destination_path="out", include_gitignore=git), "x"
        )
        with_docker = generator.build_manifest(
            GenerationRequest(destination_path="out", include_gitignore=git, include_dockerfile=True), "x"
        )
        assert len(with_docker) == len(base) + 1
        assert set(_paths(with_docker)) - set(_paths(base)) == {"Dockerfile"}

    def test_missing_asset_raises(self, tmp_path: Path):
        config = GeneratorConfig(template_dir=tmp_path)
        with pytest.raises(TemplateAssetError):
            ProjectGenerator(config).build_manifest(GenerationRequest(), "x")


# ---------------------------------------------------------------------------
# package.json
# ---------------------------------------------------------------------------


class TestBuildPackage:
    def test_shape(self, generator):
        assert generator.build_package("my-api") == {
            "name": "my-api",
            "version": "0.0.0",
            "private": True,
            "scripts": {"start": "node ./bin/www"},
            "dependencies": {"debug": "~2.6.9", "express": "~4.16.1", "morgan": "~1.9.0"},
        }

    def test_dependencies_sorted_regardless_of_insertion(self):
        config = GeneratorConfig(dependencies={"morgan": "1", "cors": "2", "express": "3", "body-parser": "4"})
        package = ProjectGenerator(config).build_package("x")
        assert list(package["dependencies"]) == ["body-parser", "cors", "express", "morgan"]

    def test_serialized_key_order(self):
        config = GeneratorConfig(dependencies={"zeta": "1", "alpha": "2"})
        text = json.dumps(ProjectGenerator(config).build_package("x"), indent=2)
        assert text.index('"alpha"') < text.index('"zeta"')


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.mark.asyncio
    async def test_writes_full_project(self, generator, tmp_project_dir: Path):
        request = GenerationRequest(
            destination_path=str(tmp_project_dir), include_gitignore=True, include_dockerfile=True
        )
        await generator.generate(request, "my-api")

        for rel in ("app.js", "routes.js", "bin/www", "config.js", "package.json", ".gitignore", "Dockerfile"):
            assert (tmp_project_dir / rel).is_file(), rel
        for rel in ("controllers", "middlewares"):
            assert (tmp_project_dir / rel).is_dir(), rel

        package = json.loads((tmp_project_dir / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "my-api"

    @pytest.mark.asyncio
    async def test_manifest_built_before_writing(self, out_console, tmp_project_dir: Path):
        renderer = MagicMock(spec=TemplateRenderer)
        renderer.read_static.side_effect = TemplateAssetError("app.js", "not found")
        writer = MagicMock(spec=FileSystemWriter)
        writer.materialize = AsyncMock()

        generator = ProjectGenerator(renderer=renderer, writer=writer, console=out_console)
        with pytest.raises(TemplateAssetError):
            await generator.generate(GenerationRequest(destination_path=str(tmp_project_dir)), "x")

        writer.materialize.assert_not_called()
        assert not tmp_project_dir.exists()

    @pytest.mark.asyncio
    async def test_instructions_printed_after_writes(self, generator, out_console, tmp_project_dir: Path):
        await generator.generate(GenerationRequest(destination_path=str(tmp_project_dir)), "my-api")
        output = out_console.file.getvalue()
        assert output.rindex("create :") < output.index("install dependencies:")


# ---------------------------------------------------------------------------
# Instructions
# ---------------------------------------------------------------------------


class TestPrintInstructions:
    def test_posix(self, generator, out_console):
        generator.print_instructions("my-api", "my-api", from_cmd=False)
        lines = out_console.file.getvalue().splitlines()
        assert "   change directory:" in lines
        assert "     $ cd my-api" in lines
        assert "     $ npm install" in lines
        assert "     $ DEBUG=my-api:* npm start" in lines

    def test_cmd_exe(self, generator, out_console):
        generator.print_instructions("my-api", "my-api", from_cmd=True)
        lines = out_console.file.getvalue().splitlines()
        assert "     > cd my-api" in lines
        assert "     > npm install" in lines
        assert "     > SET DEBUG=my-api:* & npm start" in lines

    def test_current_dir_skips_cd(self, generator, out_console):
        generator.print_instructions(".", "app", from_cmd=False)
        output = out_console.file.getvalue()
        assert "change directory" not in output
        assert "cd " not in output

    def test_long_destination_kept_on_one_line(self, narrow_console):
        destination = "/home/developer/workspace/clients/acme-corporation/services/inventory-management-api"
        generator = ProjectGenerator(GeneratorConfig(), console=narrow_console)

        generator.print_instructions(destination, "inventory-management-api", from_cmd=False)

        lines = narrow_console.file.getvalue().splitlines()
        assert f"     $ cd {destination}" in lines
        assert "     $ DEBUG=inventory-management-api:* npm start" in lines

    def test_emoji_codes_left_alone(self, generator, out_console):
        generator.print_instructions("proj/:smile:", "app", from_cmd=False)
        assert "     $ cd proj/:smile:" in out_console.file.getvalue().splitlines()
