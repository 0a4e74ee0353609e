"""Jinja2-backed view used to render pages inside a shared layout."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PrefixLoader

_CUSTOM_PREFIX = "custom"
DEFAULT_LAYOUT = "layout.html"


class Template:
    """Renders named templates from ``<template>/tmpl``.

    Attributes assigned on the instance (``find``, ``linkto``, ``members`` and
    so on) are reachable from templates through the ``view`` global.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.layout: Optional[str] = DEFAULT_LAYOUT
        self._custom_dirs: Dict[str, str] = {}
        self._env = self._create_env()

    def set_layout_file(self, layout_file: Path) -> None:
        """Use a layout that lives outside the template directory."""
        layout_file = Path(layout_file).resolve()
        self._custom_dirs[_CUSTOM_PREFIX] = str(layout_file.parent)
        self._env = self._create_env()
        self.layout = f"{_CUSTOM_PREFIX}/{layout_file.name}"

    def partial(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        template = self._env.get_template(name)
        return template.render(dict(data or {}))

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        """Render ``name`` and, when a layout is set, wrap it as ``content``."""
        content = self.partial(name, data)
        if not self.layout:
            return content
        layout_data = dict(data or {})
        layout_data["content"] = content
        return self.partial(self.layout, layout_data)

    def _create_env(self) -> Environment:
        loaders = [FileSystemLoader(str(self.path))]
        if self._custom_dirs:
            loaders.append(
                PrefixLoader({key: FileSystemLoader(path) for key, path in self._custom_dirs.items()})
            )
        env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.globals["view"] = self
        return env
