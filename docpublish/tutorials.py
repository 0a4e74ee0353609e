"""Tutorial tree supplied alongside the doclets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import markdown

_MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


@dataclass(eq=False)
class Tutorial:
    """A node of narrative documentation.

    Each node has at most one parent, so walking ``children`` recursively
    always terminates.
    """

    name: str
    title: str = ""
    content: str = ""
    type: str = "html"
    children: List["Tutorial"] = field(default_factory=list)
    parent: Optional["Tutorial"] = field(default=None, repr=False)

    @classmethod
    def root(cls) -> "Tutorial":
        return cls(name="", title="")

    def add_child(self, child: "Tutorial") -> "Tutorial":
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove_child(self, child: "Tutorial") -> None:
        if child in self.children:
            self.children.remove(child)
            child.parent = None

    def parse(self) -> str:
        """Return the tutorial content as HTML."""
        if self.type == "markdown":
            return markdown.markdown(self.content, extensions=_MARKDOWN_EXTENSIONS)
        return self.content

    def walk(self) -> Iterator["Tutorial"]:
        for child in self.children:
            yield child
            yield from child.walk()

    def find(self, name: str) -> Optional["Tutorial"]:
        for node in self.walk():
            if node.name == name:
                return node
        return None


__all__ = ["Tutorial"]
