"""Utility helpers for working with files."""

from __future__ import annotations

import posixpath
import re
from collections import deque
from pathlib import Path
from typing import Iterable, List, Tuple

from llmdocs.errors import NotFoundError

VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


def find_docs_root(start: Path, marker_names: Iterable[str], *, max_depth: int = 5) -> Path:
    """Breadth-first search for the first directory holding one of ``marker_names``.

    ``start`` itself is depth 0; directories deeper than ``max_depth`` are never
    visited. Raises :class:`NotFoundError` when nothing matches.
    """
    markers = tuple(marker_names)
    queue: deque[Tuple[Path, int]] = deque([(Path(start), 0)])
    while queue:
        directory, depth = queue.popleft()
        if any((directory / name).is_file() for name in markers):
            return directory
        if depth >= max_depth:
            continue
        for child in sorted(directory.iterdir()):
            if child.is_dir():
                queue.append((child, depth + 1))
    raise NotFoundError(f"Could not find {' or '.join(markers)} under {start} (max depth {max_depth})")


def version_key(version: str) -> Tuple[int, int, int]:
    major, minor, patch = (int(part) for part in version.split("."))
    return major, minor, patch


def list_version_dirs(root: Path) -> List[str]:
    """Version directory names under ``root``, ascending by numeric triple."""
    names = [child.name for child in root.iterdir() if child.is_dir() and VERSION_RE.match(child.name)]
    return sorted(names, key=version_key)


def relative_link(from_rel_path: str, to_rel_path: str) -> str:
    """Link from one version-root-relative page to another."""
    from_dir = posixpath.dirname(from_rel_path) or "."
    rel = posixpath.relpath(to_rel_path, from_dir)
    return rel if rel != "." else posixpath.basename(to_rel_path)


def write_text_file(root: Path, rel_path: str, content: str) -> Path:
    target = root / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8", newline="\n")
    return target
