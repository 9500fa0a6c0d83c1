"""apigen configuration.

Centralised, typed configuration for the generator. All settings use
Pydantic v2 models so they are validated at construction time and can be
overridden from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_APP_NAME = "hello-world-api"

# Shape of a resolved app name: lowercase [a-z0-9.-], no leading [-.], no trailing -.
APP_NAME_PATTERN = r"^[a-z0-9](?:[a-z0-9.-]*[a-z0-9.])?$"

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "templates"

DEFAULT_DEPENDENCIES: dict[str, str] = {
    "debug": "~2.6.9",
    "express": "~4.16.1",
    "morgan": "~1.9.0",
}

MODE_0666 = 0o666
MODE_0755 = 0o755


class GeneratorConfig(BaseModel):
    """Settings for one generator run.

    Instances are typically created once by the CLI entry point and then
    passed through the pipeline, the project generator and the writer.
    """

    default_app_name: str = Field(
        default=DEFAULT_APP_NAME,
        min_length=1,
        pattern=APP_NAME_PATTERN,
        description="Name used when the destination path yields no usable name",
    )
    package_version: str = Field(default="0.0.0", min_length=1)
    start_script: str = Field(default="node ./bin/www")
    dependencies: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DEPENDENCIES),
        description="npm dependency name -> semver range",
    )
    template_dir: Path = Field(default=DEFAULT_TEMPLATE_DIR)

    file_mode: int = Field(default=MODE_0666, ge=0, le=0o7777)
    dir_mode: int = Field(default=MODE_0755, ge=0, le=0o7777)
    exec_mode: int = Field(default=MODE_0755, ge=0, le=0o7777)

    subdirectories: list[str] = Field(
        default=["bin", "controllers", "middlewares"],
        description="Directories created inside every generated project",
    )
    confirm_question: str = Field(default="destination is not empty, continue? [y/N] ")

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            APIGEN_TEMPLATE_DIR, APIGEN_DEFAULT_NAME, APIGEN_PACKAGE_VERSION.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("APIGEN_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["APIGEN_TEMPLATE_DIR"])
        if os.environ.get("APIGEN_DEFAULT_NAME"):
            kwargs["default_app_name"] = os.environ["APIGEN_DEFAULT_NAME"]
        if os.environ.get("APIGEN_PACKAGE_VERSION"):
            kwargs["package_version"] = os.environ["APIGEN_PACKAGE_VERSION"]
        return cls(**kwargs)
