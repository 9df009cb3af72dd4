import shutil
from pathlib import Path

import pytest

from lambdaserve.domain.errors import CopyFailure, DirectoryExistsError
from lambdaserve.repo.ignore import DEFAULT_EXCLUDES, build_exclude_set
from lambdaserve.repo import stager
from lambdaserve.repo.stager import copy_tree


def write(p: Path, data: bytes) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)


def make_tree(root: Path) -> None:
    write(root / "index.js", b"exports.handler = async () => ({});\n")
    write(root / "lib" / "util.js", b"module.exports = {};\n")
    write(root / "lib" / "deep" / "blob.bin", bytes(range(256)))
    write(root / ".git" / "HEAD", b"ref: refs/heads/main\n")
    write(root / "package.json", b"{}")
    write(root / "lib" / "node_modules" / "x" / "index.js", b"")
    (root / "empty").mkdir()


def snapshot(root: Path) -> tuple[set[str], set[str]]:
    files = {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}
    dirs = {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_dir()}
    return files, dirs


def test_copy_tree_skips_excluded_names_at_any_depth(tmp_path: Path):
    src = tmp_path / "src"
    make_tree(src)
    dest = tmp_path / "out"

    copy_tree(src, dest, DEFAULT_EXCLUDES)

    files, dirs = snapshot(dest)
    assert files == {"index.js", "lib/util.js", "lib/deep/blob.bin"}
    assert dirs == {"lib", "lib/deep", "empty"}
    assert (dest / "lib" / "deep" / "blob.bin").read_bytes() == bytes(range(256))


def test_copy_tree_without_excludes_copies_everything(tmp_path: Path):
    src = tmp_path / "src"
    make_tree(src)
    dest = tmp_path / "out"

    copy_tree(src, dest)

    assert snapshot(dest) == snapshot(src)
    for rel in snapshot(src)[0]:
        assert (dest / rel).read_bytes() == (src / rel).read_bytes()


def test_copy_tree_refuses_existing_destination(tmp_path: Path):
    src = tmp_path / "src"
    make_tree(src)
    dest = tmp_path / "out"
    write(dest / "keep.txt", b"mine")

    with pytest.raises(DirectoryExistsError):
        copy_tree(src, dest, DEFAULT_EXCLUDES)

    assert snapshot(dest) == ({"keep.txt"}, set())
    assert (dest / "keep.txt").read_bytes() == b"mine"


def test_copy_tree_does_not_recurse_into_nested_destination(tmp_path: Path):
    src = tmp_path / "src"
    make_tree(src)
    dest = src / "server"

    copy_tree(src, dest, DEFAULT_EXCLUDES)

    assert not (dest / "server").exists()
    assert (dest / "lib" / "util.js").is_file()


def test_copy_tree_wraps_io_errors(tmp_path: Path):
    dest = tmp_path / "out"
    with pytest.raises(CopyFailure) as exc:
        copy_tree(tmp_path / "missing", dest)

    assert isinstance(exc.value.__cause__, OSError)
    # no rollback: the root was already created
    assert dest.is_dir()


def test_build_exclude_set_extends_defaults():
    s = build_exclude_set(["coverage", " ", ""])
    assert "coverage" in s
    assert DEFAULT_EXCLUDES <= s
    assert "" not in s


def test_copy_tree_keeps_nested_dirs_named_like_destination(tmp_path: Path):
    src = tmp_path / "proj"
    write(src / "lib" / "server" / "routes.js", b"module.exports = {};\n")
    write(src / "index.js", b"")
    dest = tmp_path / "server"

    copy_tree(src, dest, DEFAULT_EXCLUDES)

    assert (dest / "lib" / "server" / "routes.js").is_file()
    assert snapshot(dest) == snapshot(src)


def test_copy_tree_file_failure_keeps_partial_output(tmp_path: Path, monkeypatch):
    src = tmp_path / "src"
    for name in ("one.txt", "two.txt", "three.txt"):
        write(src / name, name.encode())
    dest = tmp_path / "out"

    real_copyfile = shutil.copyfile
    copied: list[str] = []

    def flaky_copyfile(s, d, *args, **kwargs):
        if copied:
            raise PermissionError(13, "Permission denied", s)
        real_copyfile(s, d, *args, **kwargs)
        copied.append(Path(d).name)

    monkeypatch.setattr(stager.shutil, "copyfile", flaky_copyfile)

    with pytest.raises(CopyFailure) as exc:
        copy_tree(src, dest)

    assert isinstance(exc.value.__cause__, PermissionError)
    # first file stays, nothing is rolled back
    assert len(copied) == 1
    assert sorted(p.name for p in dest.iterdir()) == copied
    assert (dest / copied[0]).read_bytes() == copied[0].encode()
