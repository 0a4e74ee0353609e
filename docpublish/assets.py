"""Static asset discovery and copying into the output directory."""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Pattern, Sequence

from .config import StaticFilesConfig
from .logging import get_logger

logger = get_logger("assets")

THEME_STATIC_DEPTH = 3
USER_STATIC_DEPTH = 10


def ls(directory: Path, depth: int = 0) -> List[Path]:
    """Return files under ``directory`` and at most ``depth`` levels of subdirectories."""
    directory = Path(directory)
    return sorted(_walk(directory, depth))


def _walk(directory: Path, depth: int) -> Iterator[Path]:
    for entry in sorted(os.scandir(directory), key=lambda item: item.name):
        path = Path(entry.path)
        if entry.is_dir():
            if depth > 0:
                yield from _walk(path, depth - 1)
        elif entry.is_file():
            yield path


class FileFilter:
    """Decides whether a discovered file should be copied.

    ``exclude`` entries are path prefixes resolved against ``base_dir``;
    the patterns are regular expressions searched in the absolute path.
    """

    def __init__(
        self,
        *,
        exclude: Sequence[str] = (),
        include_pattern: Optional[str] = None,
        exclude_pattern: Optional[str] = None,
        base_dir: Path | None = None,
    ) -> None:
        self.base_dir = (base_dir or Path.cwd()).resolve()
        self.exclude = [str((self.base_dir / item).resolve()) for item in exclude]
        self.include_pattern: Optional[Pattern[str]] = (
            re.compile(include_pattern) if include_pattern else None
        )
        self.exclude_pattern: Optional[Pattern[str]] = (
            re.compile(exclude_pattern) if exclude_pattern else None
        )

    @classmethod
    def from_config(cls, config: StaticFilesConfig, base_dir: Path | None = None) -> "FileFilter":
        return cls(
            exclude=config.exclude,
            include_pattern=config.include_pattern,
            exclude_pattern=config.exclude_pattern,
            base_dir=base_dir,
        )

    def is_included(self, path: Path) -> bool:
        filepath = str((self.base_dir / path).resolve())
        if self.include_pattern is not None and not self.include_pattern.search(filepath):
            return False
        if self.exclude_pattern is not None and self.exclude_pattern.search(filepath):
            return False
        return not any(filepath.startswith(prefix) for prefix in self.exclude)


class FileScanner:
    """Expands files and directories into a de-duplicated list of files."""

    def scan(
        self,
        search_paths: Iterable[Path],
        depth: int = 1,
        file_filter: FileFilter | None = None,
    ) -> List[Path]:
        found: List[Path] = []
        seen: set[Path] = set()
        for search_path in search_paths:
            search_path = Path(search_path)
            if search_path.is_dir():
                candidates = ls(search_path, depth)
            elif search_path.is_file():
                candidates = [search_path]
            else:
                logger.warning("Static file path not found: %s", search_path)
                continue
            for candidate in candidates:
                if candidate in seen:
                    continue
                if file_filter is not None and not file_filter.is_included(candidate):
                    continue
                seen.add(candidate)
                found.append(candidate)
        return found


def copy_theme_static(template_dir: Path, outdir: Path) -> List[Path]:
    """Copy the theme's ``static`` directory into ``outdir``."""
    from_dir = Path(template_dir) / "static"
    if not from_dir.is_dir():
        logger.debug("Template %s has no static directory", template_dir)
        return []

    copied: List[Path] = []
    for filename in ls(from_dir, THEME_STATIC_DEPTH):
        copied.append(_copy_into(filename, from_dir, outdir))
    return copied


def copy_user_static(
    config: StaticFilesConfig, outdir: Path, *, base_dir: Path | None = None
) -> List[Path]:
    """Copy each configured static file to its own path under ``outdir``.

    Paths are preserved relative to the include entry they were found
    through: a directory include is its own root, a file include is rooted at
    its parent directory.
    """
    base = (base_dir or Path.cwd()).resolve()
    file_filter = FileFilter.from_config(config, base_dir=base)
    scanner = FileScanner()

    copied: List[Path] = []
    for include in config.include:
        include_path = (base / include).resolve()
        scan_root = include_path if include_path.is_dir() else include_path.parent
        for filename in scanner.scan([include_path], USER_STATIC_DEPTH, file_filter):
            copied.append(_copy_into(filename, scan_root, outdir))
    return copied


def _copy_into(filename: Path, root: Path, outdir: Path) -> Path:
    destination = Path(outdir) / filename.relative_to(root)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(filename, destination)
    logger.debug("Copied %s -> %s", filename, destination)
    return destination


__all__ = [
    "FileFilter",
    "FileScanner",
    "copy_theme_static",
    "copy_user_static",
    "ls",
]
