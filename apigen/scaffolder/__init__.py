"""apigen scaffolder -- renders and writes the Express API starter.

Quick usage::

    from apigen.models import GenerationRequest
    from apigen.scaffolder import ProjectGenerator

    generator = ProjectGenerator()
    await generator.generate(GenerationRequest(destination_path="my-api"), "my-api")
"""

from apigen.scaffolder.generator import ProjectGenerator
from apigen.scaffolder.templates import TemplateRenderer, inspect_value
from apigen.scaffolder.writer import FileSystemWriter

__all__ = [
    "FileSystemWriter",
    "ProjectGenerator",
    "TemplateRenderer",
    "inspect_value",
]
