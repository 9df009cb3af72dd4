from __future__ import annotations

from pathlib import Path
from typing import Iterable

DEFAULT_EXCLUDES = frozenset(
    {
        ".git",
        "node_modules",
        "package.json",
        "package-lock.json",
        ".gitignore",
        ".dockerignore",
        "Dockerfile",
        "tsconfig.json",
    }
)


def build_exclude_set(extra: Iterable[str] = ()) -> frozenset[str]:
    return DEFAULT_EXCLUDES | {e.strip() for e in extra if e and e.strip()}


def should_exclude(path: Path, exclude_names: Iterable[str]) -> bool:
    # bare-name match, so it applies at any depth
    return path.name in exclude_names
