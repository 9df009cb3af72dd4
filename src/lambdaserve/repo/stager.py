from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable

from lambdaserve.domain.errors import CopyFailure, DirectoryExistsError
from lambdaserve.repo.ignore import should_exclude


def copy_tree(src_dir: Path, dest_dir: Path, exclude_names: Iterable[str] = ()) -> None:
    """
    Copy src_dir into a brand new dest_dir, skipping excluded names at every level.

    Raises DirectoryExistsError if dest_dir already exists (nothing is touched),
    CopyFailure if listing or copying fails. A failed copy leaves whatever was
    already staged in place.
    """
    src_dir = Path(src_dir)
    dest_dir = Path(dest_dir)
    if dest_dir.exists():
        raise DirectoryExistsError(dest_dir)

    excludes = frozenset(exclude_names)
    try:
        dest_dir.mkdir()
        _copy_entries(src_dir, dest_dir, excludes, staged_root=dest_dir.resolve())
    except OSError as e:
        raise CopyFailure(src_dir, dest_dir) from e


def _copy_entries(src: Path, dest: Path, excludes: frozenset[str], staged_root: Path) -> None:
    with os.scandir(src) as it:
        entries = list(it)

    for entry in entries:
        # never recurse into the output dir when it sits inside the source tree
        if should_exclude(Path(entry.path), excludes) or Path(entry.path).resolve() == staged_root:
            continue

        target = dest / entry.name
        if entry.is_dir():
            target.mkdir()
            _copy_entries(Path(entry.path), target, excludes, staged_root)
        else:
            shutil.copyfile(entry.path, target)
