"""Helper utilities for constructing doclet sets and source trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Dict, List, Mapping

from docpublish.config import PublishOptions
from docpublish.models import Doclet
from docpublish.store import DocletStore
from docpublish.tutorials import Tutorial


class DocletSetBuilder:
    """Writes a small documented project and produces fresh doclet stores for it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.src = self.root / "src" / "lib"
        self.out = self.root / "out"
        self.root.mkdir()
        self.write(
            {
                "src/lib/foo.js": """
                    /** @module foo */
                    module.exports = class Foo {};
                """,
                "src/lib/util/bar.js": """
                    class Widget {
                        render() { return "<b>" + this.name + "</b>"; }
                    }
                """,
            }
        )

    def write(self, files: Mapping[str, str]) -> None:
        """Write ``path -> contents`` entries below the project root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def records(self) -> List[Dict[str, Any]]:
        """Return host-shaped doclet records for the project."""
        foo_meta = {"filename": "foo.js", "path": str(self.src), "lineno": 1}
        bar_meta = {"filename": "bar.js", "path": str(self.src / "util"), "lineno": 1}
        return [
            {
                "kind": "module",
                "name": "foo",
                "longname": "module:foo",
                "description": "Foo module.",
                "meta": foo_meta,
            },
            {
                "kind": "class",
                "name": "module:foo",
                "longname": "module:foo",
                "description": "The exported class.",
                "params": [{"name": "options", "type": {"names": ["Object"]}, "optional": True}],
                "meta": dict(foo_meta, lineno=2),
            },
            {
                "kind": "class",
                "name": "Widget",
                "longname": "Widget",
                "scope": "global",
                "description": "A widget.",
                "params": [
                    {"name": "name", "type": {"names": ["string"]}},
                    {"name": "opts", "type": {"names": ["Object"]}, "optional": True},
                    {"name": "opts.size", "type": {"names": ["number"]}},
                ],
                "meta": bar_meta,
            },
            {
                "kind": "function",
                "name": "render",
                "longname": "Widget#render",
                "memberof": "Widget",
                "scope": "instance",
                "description": "Render the widget.",
                "returns": [{"type": {"names": ["string"]}}],
                "examples": ["<caption>Usage</caption>\nwidget.render();"],
                "see": ["#size"],
                "meta": dict(bar_meta, lineno=2),
            },
            {
                "kind": "member",
                "name": "size",
                "longname": "Widget#size",
                "memberof": "Widget",
                "scope": "instance",
                "type": {"names": ["number"]},
                "description": "Size in pixels.",
            },
            {
                "kind": "constant",
                "name": "DEFAULT",
                "longname": "Widget.DEFAULT",
                "memberof": "Widget",
                "scope": "static",
                "type": {"names": ["Widget"]},
                "description": "The default widget.",
            },
            {
                "kind": "typedef",
                "name": "Callback",
                "longname": "Widget~Callback",
                "memberof": "Widget",
                "scope": "inner",
                "type": {"names": ["function"]},
                "params": [{"name": "err", "type": {"names": ["Error"]}, "nullable": True}],
            },
            {
                "kind": "event",
                "name": "change",
                "longname": "Widget#event:change",
                "memberof": "Widget",
                "scope": "instance",
                "description": "Fired on change.",
            },
            {
                "kind": "function",
                "name": "listen",
                "longname": "Widget#listen",
                "memberof": "Widget",
                "scope": "instance",
                "description": "Reacts to changes.",
                "listens": ["Widget#event:change"],
            },
            {
                "kind": "function",
                "name": "helper",
                "longname": "helper",
                "scope": "global",
                "description": "A global helper for {@link Widget}.",
                "meta": dict(foo_meta, lineno=3),
            },
            {
                "kind": "function",
                "name": "hidden",
                "longname": "hidden",
                "scope": "global",
                "undocumented": True,
            },
            {
                "kind": "namespace",
                "name": "tools",
                "longname": "tools",
                "scope": "global",
                "description": "Tools namespace.",
            },
            {
                "kind": "package",
                "name": "demo",
                "longname": "package:demo",
                "version": "1.0.0",
            },
        ]

    def store(self) -> DocletStore:
        """Return a new store; publishing decorates doclets in place."""
        return DocletStore(Doclet.from_dict(record) for record in self.records())

    def tutorials(self) -> Tutorial:
        root = Tutorial.root()
        intro = root.add_child(
            Tutorial(
                name="getting-started",
                title="Getting Started",
                content="# Hello\n\nStart with {@link Widget}.",
                type="markdown",
            )
        )
        intro.add_child(Tutorial(name="advanced", title="Advanced", content="<p>Deep dive.</p>"))
        return root

    def options(self, **overrides: Any) -> PublishOptions:
        options = PublishOptions(destination=str(self.out), readme="<h1>Demo readme</h1>")
        for key, value in overrides.items():
            setattr(options, key, value)
        return options


__all__ = ["DocletSetBuilder"]
