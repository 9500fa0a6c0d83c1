"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``apigen/scaffolder/templates/`` directory and renders them with
per-generation context data, plus verbatim access to the static assets that
live next to them.

Every ``{{ expression }}`` is passed through :func:`inspect_value` rather than
HTML-escaped, so a context value lands in the generated JavaScript as a
literal: ``{{ name }}`` with ``name="my-app"`` renders as ``'my-app'``.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from apigen.config import DEFAULT_TEMPLATE_DIR
from apigen.errors import TemplateAssetError
from apigen.models import TemplateDescriptor

_BARE_KEY = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Nesting levels shown before containers collapse to [Object] / [Array].
INSPECT_DEPTH = 2

_CONTROL_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


# ---------------------------------------------------------------------------
# Escaping policy
# ---------------------------------------------------------------------------


def inspect_value(value: Any) -> str:
    """Stringify *value* the way a JavaScript debug inspector would.

    Containers nested more than :data:`INSPECT_DEPTH` levels deep collapse
    to ``[Object]`` / ``[Array]``.

    Examples::

        inspect_value("my-app")        -> "'my-app'"
        inspect_value("it's")          -> '"it's"'
        inspect_value(1e21)            -> "1e+21"
        inspect_value(None)            -> "null"
        inspect_value([1, "a"])        -> "[ 1, 'a' ]"
        inspect_value({"port": 3000})  -> "{ port: 3000 }"
    """
    return _inspect(value, 0)


def _inspect(value: Any, level: int) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        if level > INSPECT_DEPTH:
            return "[Array]"
        return "[ " + ", ".join(_inspect(item, level + 1) for item in value) + " ]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        if level > INSPECT_DEPTH:
            return "[Object]"
        parts = []
        for key, item in value.items():
            key_str = str(key)
            label = key_str if _BARE_KEY.match(key_str) else quote_string(key_str)
            parts.append(f"{label}: {_inspect(item, level + 1)}")
        return "{ " + ", ".join(parts) + " }"
    return quote_string(str(value))


def quote_string(value: str) -> str:
    """Quote *value* as a JavaScript string literal.

    Single quotes are preferred; double quotes, then backticks, are used when
    they avoid escaping. Only the chosen quote character is escaped.
    """
    quote = "'"
    if "'" in value:
        if '"' not in value:
            quote = '"'
        elif "`" not in value and "${" not in value:
            quote = "`"

    out = []
    for char in value:
        if char == quote or char == "\\":
            out.append("\\" + char)
        elif char in _CONTROL_ESCAPES:
            out.append(_CONTROL_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\x{ord(char):02X}")
        else:
            out.append(char)
    return quote + "".join(out) + quote


def format_number(value: float) -> str:
    """Format *value* the way JavaScript inspection prints a number (``-0`` kept)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign = "-" if value < 0 else ""
    # repr() yields the shortest round-tripping digits, as JavaScript does.
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates and reads static assets for scaffolding.

    Templates are ``.j2`` files under the template directory; static assets
    (copied verbatim into the generated project) sit alongside them.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            finalize=inspect_value,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    # -- Rendering ---------------------------------------------------------

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render ``<template_name>.j2`` with *context*.

        Raises:
            TemplateAssetError: If the template is missing, unreadable or
                fails to render.
        """
        source = f"{template_name}.j2"
        try:
            template = self.env.get_template(source)
            return template.render(**context)
        except TemplateNotFound as exc:
            raise TemplateAssetError(source, "not found") from exc
        except (TemplateError, OSError, UnicodeDecodeError) as exc:
            raise TemplateAssetError(source, str(exc)) from exc

    def render_descriptor(self, descriptor: TemplateDescriptor) -> str:
        """Render the template a :class:`TemplateDescriptor` points at."""
        return self.render(descriptor.source_name, descriptor.context)

    # -- Static assets -----------------------------------------------------

    def read_static(self, name: str) -> str:
        """Return the verbatim content of a non-templated asset."""
        path = self.template_dir / name
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise TemplateAssetError(name, "not found") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateAssetError(name, str(exc)) from exc
