"""File discovery — find project files respecting ``ignore_paths``."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Iterable, Iterator

_GLOB_CHARS = frozenset("*?[")


def relative_posix(path: Path, root: Path) -> str:
    """*path* relative to *root* as a POSIX string (absolute if outside)."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def is_ignored(rel_path: str, ignore_paths: Iterable[str]) -> bool:
    """Return True when *rel_path* falls under any entry of *ignore_paths*.

    Entries with glob metacharacters are matched with ``fnmatch`` against
    the full relative path and the basename. Other entries match as a
    path-segment prefix anywhere in the path: ``vendor/`` excludes both
    ``vendor/a.php`` and ``packages/vendor/a.php`` but not ``vendors.php``.
    """
    rel = rel_path.replace("\\", "/").strip("/")
    name = rel.rsplit("/", 1)[-1]
    wrapped = f"/{rel}/"
    for raw in ignore_paths:
        pattern = raw.replace("\\", "/").strip()
        if not pattern:
            continue
        if _GLOB_CHARS.intersection(pattern):
            pattern = pattern.strip("/")
            if fnmatch.fnmatch(rel, pattern) or fnmatch.fnmatch(name, pattern):
                return True
            continue
        segment = pattern.strip("/")
        if segment and f"/{segment}/" in wrapped:
            return True
    return False


def iter_files(
    root: Path,
    base: Path,
    *,
    suffix: str = ".php",
    ignore_paths: Iterable[str] = (),
    name_glob: str | None = None,
) -> Iterator[Path]:
    """Yield files under *base* with *suffix*, sorted, skipping ignored paths.

    Ignore rules are evaluated against the path relative to *root* (the
    project root), not *base*. Symlinks are not followed.
    """
    if not base.is_dir():
        return
    ignore = tuple(ignore_paths)
    candidates: list[Path] = []
    for p in base.rglob(f"*{suffix}"):
        try:
            if p.is_symlink() or not p.is_file():
                continue
        except OSError:
            continue
        if name_glob is not None and not fnmatch.fnmatch(p.name, name_glob):
            continue
        if is_ignored(relative_posix(p, root), ignore):
            continue
        candidates.append(p)
    yield from sorted(candidates)


def read_lines(path: Path) -> list[str] | None:
    """Read *path* as text lines, or ``None`` if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return None
