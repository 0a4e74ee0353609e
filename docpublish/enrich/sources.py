"""Source file paths: resolution from doclet metadata and display shortening."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..models import Doclet

_SEPARATORS = re.compile(r"[\\/]")


@dataclass
class SourceFile:
    """A source file referenced by at least one doclet."""

    resolved: str
    shortened: Optional[str] = None


def path_from_doclet(doclet: Doclet) -> Optional[str]:
    if doclet.meta is None:
        return None
    if doclet.meta.path and doclet.meta.path != "null":
        return os.path.join(doclet.meta.path, doclet.meta.filename)
    return doclet.meta.filename


def common_prefix(paths: Sequence[str]) -> str:
    """Return the longest shared directory of ``paths`` with a trailing ``/``.

    A single path yields its own directory. Separators are normalised to
    ``/`` so the prefix can be stripped from normalised paths.
    """
    if not paths:
        return ""

    split_dirs: List[List[str]] = []
    for path in paths:
        segments = _SEPARATORS.split(path)
        split_dirs.append(segments[:-1])

    shared: List[str] = []
    for parts in zip(*split_dirs):
        if any(part != parts[0] for part in parts[1:]):
            break
        shared.append(parts[0])

    if not shared:
        return ""
    return "/".join(shared) + "/"


def shorten_paths(files: Dict[str, SourceFile], prefix: str) -> Dict[str, SourceFile]:
    for source in files.values():
        resolved = source.resolved.replace("\\", "/")
        if prefix and resolved.startswith(prefix):
            resolved = resolved[len(prefix):]
        source.shortened = resolved
    return files
