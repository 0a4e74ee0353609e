"""Queryable collection of doclets handed over by the host."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Mapping, Optional

from .models import Doclet

_MISSING = object()


class DocletStore:
    """Ordered doclet collection supporting field-match queries.

    Query specs map field names to expected values::

        store.find({"kind": "class"})
        store.find({"kind": ["member", "function"], "memberof": {"isUndefined": True}})
        store.find({"longname": {"left": "module:"}})

    A list matches any of its items. Operator mappings support ``left``
    (string prefix), ``isUndefined`` and ``is``.
    """

    def __init__(self, doclets: Iterable[Doclet] | None = None) -> None:
        self._doclets: List[Doclet] = list(doclets or [])

    @classmethod
    def from_json(cls, path: Path) -> "DocletStore":
        """Load a JSON array of doclet records (the host's ``-X`` dump)."""
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(payload, list):
            raise ValueError(f"{path} must contain a JSON array of doclets")
        return cls(Doclet.from_dict(item) for item in payload if isinstance(item, dict))

    def __iter__(self) -> Iterator[Doclet]:
        return iter(self._doclets)

    def __len__(self) -> int:
        return len(self._doclets)

    def find(self, spec: Mapping[str, Any] | None = None) -> List[Doclet]:
        """Return doclets matching every field in ``spec``, in store order."""
        if not spec:
            return list(self._doclets)
        return [doclet for doclet in self._doclets if _matches(doclet, spec)]

    def prune(self, *, include_private: bool = False) -> "DocletStore":
        """Drop undocumented, ignored, anonymous and (optionally) private doclets."""
        kept: List[Doclet] = []
        for doclet in self._doclets:
            if doclet.undocumented or doclet.ignore:
                continue
            if doclet.memberof == "<anonymous>":
                continue
            if doclet.access == "private" and not include_private:
                continue
            kept.append(doclet)
        self._doclets = kept
        return self

    def sort(self, *fields: str) -> "DocletStore":
        """Stable sort by ``fields``; unset values sort first."""

        def _key(doclet: Doclet) -> tuple:
            parts = []
            for name in fields:
                value = getattr(doclet, name, None)
                parts.append((0, "") if value is None else (1, str(value)))
            return tuple(parts)

        self._doclets.sort(key=_key)
        return self


def _matches(doclet: Doclet, spec: Mapping[str, Any]) -> bool:
    for name, expected in spec.items():
        value = getattr(doclet, name, _MISSING)
        if value is _MISSING:
            value = doclet.extra.get(name)
        if not _match_value(value, expected):
            return False
    return True


def _match_value(value: Any, expected: Any) -> bool:
    if isinstance(expected, dict):
        return all(_apply_operator(value, op, arg) for op, arg in expected.items())
    if isinstance(expected, (list, tuple, set)):
        return value in expected
    return value == expected


def _apply_operator(value: Any, op: str, arg: Any) -> bool:
    if op == "left":
        return isinstance(value, str) and value.startswith(arg)
    if op == "isUndefined":
        return (value is None) == bool(arg)
    if op == "is":
        return value == arg
    raise ValueError(f"Unsupported query operator: {op}")


def first(doclets: List[Doclet]) -> Optional[Doclet]:
    return doclets[0] if doclets else None


__all__ = ["DocletStore", "first"]
