"""Filesystem helpers: directory mirroring, additive copies and single files."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable

from .models import DirectorySyncMode, SyncReport

MTIME_SLOP_SECONDS = 2.0


def ensure_parent(path: Path) -> None:
    """Ensure the parent directory exists."""

    path.parent.mkdir(parents=True, exist_ok=True)


def remove_path(path: Path) -> None:
    """Delete ``path`` whether it is a file, directory, or symlink."""

    if not path.exists() and not path.is_symlink():
        return
    if path.is_symlink() or path.is_file():
        path.unlink()
        return
    shutil.rmtree(path)


def is_unchanged(source: Path, destination: Path, *, mtime_slop: float = MTIME_SLOP_SECONDS) -> bool:
    """Return ``True`` when ``destination`` matches ``source`` by size and mtime."""

    try:
        source_stat = source.stat()
        destination_stat = destination.stat()
    except OSError:
        return False
    if source_stat.st_size != destination_stat.st_size:
        return False
    return abs(source_stat.st_mtime - destination_stat.st_mtime) <= mtime_slop


def copy_single(source: Path, destination: Path, *, overwrite: bool) -> bool:
    """Copy one file preserving metadata.

    Returns ``False`` without touching anything when ``destination`` exists and
    ``overwrite`` is not set.
    """

    exists = destination.exists() or destination.is_symlink()
    if exists and not overwrite:
        return False

    ensure_parent(destination)
    if exists and (destination.is_dir() or destination.is_symlink()):
        remove_path(destination)
    shutil.copy2(source, destination)
    return True


def sync_tree(source: Path, destination: Path, mode: DirectorySyncMode) -> SyncReport:
    """Synchronise ``destination`` from ``source`` using ``mode``."""

    if mode is DirectorySyncMode.MIRROR:
        return mirror_tree(source, destination)
    return additive_tree(source, destination)


def mirror_tree(source: Path, destination: Path) -> SyncReport:
    """Make ``destination`` an exact replica of ``source``.

    Files missing from ``destination`` or differing in size or mtime are copied,
    empty directories are created, and anything absent from ``source`` is deleted.
    """

    errors: list[str] = []
    try:
        if destination.exists() and not destination.is_dir():
            destination.unlink()
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return SyncReport(errors=(_describe(destination, exc),))

    deleted = _purge_extraneous(source, destination, errors)
    copied, skipped = _copy_tree(source, destination, errors, overwrite_changed=True)
    return SyncReport(copied=copied, deleted=deleted, skipped=skipped, errors=tuple(errors))


def additive_tree(source: Path, destination: Path) -> SyncReport:
    """Copy files that do not exist in ``destination``; never overwrite or delete."""

    errors: list[str] = []
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return SyncReport(errors=(_describe(destination, exc),))

    copied, skipped = _copy_tree(source, destination, errors, overwrite_changed=False)
    return SyncReport(copied=copied, skipped=skipped, errors=tuple(errors))


def _copy_tree(source: Path, destination: Path, errors: list[str], *, overwrite_changed: bool) -> tuple[int, int]:
    copied = 0
    skipped = 0
    # Real paths of each walked folder and its ancestors, to stop at link loops.
    ancestry = {os.fspath(source): frozenset({os.path.realpath(source)})}

    for dirpath, dirnames, filenames in os.walk(source, onerror=_error_collector(errors, source), followlinks=True):
        current = Path(dirpath)
        target_dir = destination / current.relative_to(source)
        chain = ancestry.pop(dirpath, frozenset())

        kept: list[str] = []
        for name in sorted(dirnames):
            child = os.path.join(dirpath, name)
            real = os.path.realpath(child)
            if real in chain:
                errors.append(f"{child}: link points back into its own tree, not followed")
                continue
            ancestry[child] = chain | {real}
            kept.append(name)
            target = target_dir / name
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                if overwrite_changed or not target.exists():
                    errors.append(_describe(target, exc))
        dirnames[:] = kept

        for name in sorted(filenames):
            src = current / name
            dst = target_dir / name
            if dst.exists() or dst.is_symlink():
                if not overwrite_changed or is_unchanged(src, dst):
                    skipped += 1
                    continue
            try:
                copy_single(src, dst, overwrite=True)
            except OSError as exc:
                errors.append(_describe(dst, exc))
                continue
            copied += 1

    return copied, skipped


def _purge_extraneous(source: Path, destination: Path, errors: list[str]) -> int:
    """Delete entries of ``destination`` that have no same-kind counterpart in ``source``."""

    deleted = 0
    for dirpath, dirnames, filenames in os.walk(destination, onerror=_error_collector(errors, destination)):

        current = Path(dirpath)
        counterpart = source / current.relative_to(destination)

        for name in list(dirnames):
            if (counterpart / name).is_dir():
                continue
            dirnames.remove(name)
            deleted += _remove(current / name, errors)

        for name in filenames:
            mirrored = counterpart / name
            if mirrored.is_file():
                continue
            deleted += _remove(current / name, errors)

    return deleted


def _remove(path: Path, errors: list[str]) -> int:
    try:
        remove_path(path)
    except OSError as exc:
        errors.append(_describe(path, exc))
        return 0
    return 1


def _describe(path: Path, exc: OSError) -> str:
    return f"{path}: {exc.strerror or exc}"


def _error_collector(errors: list[str], root: Path) -> Callable[[OSError], None]:
    """Return an ``os.walk`` error hook that records unreadable folders."""

    def on_error(exc: OSError) -> None:
        errors.append(_describe(Path(exc.filename or root), exc))

    return on_error
