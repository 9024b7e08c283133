"""The fixed list of configuration items copied from Live to PTR."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .models import CopyManifestEntry, EntryKind, SideSelection

ACCOUNT_DIR = "WTF/Account/{account}"
CHARACTER_DIR = "WTF/Account/{account}/{realm}/{character}"

MANIFEST: tuple[CopyManifestEntry, ...] = (
    CopyManifestEntry("AddOns", EntryKind.DIRECTORY_TREE, "Interface/AddOns"),
    CopyManifestEntry("Account SavedVariables", EntryKind.DIRECTORY_TREE, f"{ACCOUNT_DIR}/SavedVariables"),
    CopyManifestEntry("Character SavedVariables", EntryKind.DIRECTORY_TREE, f"{CHARACTER_DIR}/SavedVariables"),
    CopyManifestEntry("Config", EntryKind.SINGLE_FILE, "WTF/Config.wtf"),
    CopyManifestEntry("Character config cache", EntryKind.SINGLE_FILE, f"{CHARACTER_DIR}/config-cache.wtf"),
    CopyManifestEntry("Account bindings", EntryKind.SINGLE_FILE, f"{ACCOUNT_DIR}/bindings-cache.wtf"),
    CopyManifestEntry("Character bindings", EntryKind.SINGLE_FILE, f"{CHARACTER_DIR}/bindings-cache.wtf"),
    CopyManifestEntry(
        "Account macros",
        EntryKind.SINGLE_FILE,
        f"{ACCOUNT_DIR}/macros-cache.txt",
        alternates=(f"{ACCOUNT_DIR}/macros-cache.wtf",),
    ),
    CopyManifestEntry(
        "Character macros",
        EntryKind.SINGLE_FILE,
        f"{CHARACTER_DIR}/macros-cache.txt",
        alternates=(f"{CHARACTER_DIR}/macros-cache.wtf",),
    ),
)


class ManifestError(LookupError):
    """Raised when a manifest label is unknown."""


def select_entries(labels: Iterable[str] | None = None) -> tuple[CopyManifestEntry, ...]:
    """Return manifest entries in manifest order, optionally limited to ``labels``."""

    if labels is None:
        return MANIFEST

    wanted = {label.casefold() for label in labels}
    known = {entry.label.casefold() for entry in MANIFEST}
    unknown = sorted(wanted - known)
    if unknown:
        raise ManifestError(f"Unknown manifest entries: {', '.join(unknown)}")
    return tuple(entry for entry in MANIFEST if entry.label.casefold() in wanted)


def locate_source(entry: CopyManifestEntry, live: SideSelection) -> tuple[str, Path] | None:
    """Return the first template whose Live path exists, with that path."""

    for template in entry.templates():
        candidate = live.render(template)
        if entry.kind is EntryKind.DIRECTORY_TREE and candidate.is_dir():
            return template, candidate
        if entry.kind is EntryKind.SINGLE_FILE and candidate.is_file():
            return template, candidate
    return None
