"""Shared models and enums for ptrsync."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Union

NameFilter = Callable[[str], bool]


class OverwritePolicy(str, Enum):
    """Global overwrite policy chosen once per run."""

    MIRROR_ALL = "mirror"
    ADDITIVE_ONLY = "additive"
    ASK_PER_OPERATION = "ask"


class DirectorySyncMode(str, Enum):
    """How a single directory tree is synchronised."""

    MIRROR = "mirror"
    ADDITIVE_ONLY = "additive"


class EntryKind(str, Enum):
    """Kinds of items listed in the copy manifest."""

    DIRECTORY_TREE = "directory"
    SINGLE_FILE = "file"


@dataclass(frozen=True, slots=True)
class Selected:
    """A listed folder was picked; ``value`` is a name or a full path."""

    value: str


@dataclass(frozen=True, slots=True)
class ManualEntry:
    """The user typed a folder by hand."""

    value: str


@dataclass(frozen=True, slots=True)
class Back:
    """The user asked to return to the previous step."""


@dataclass(frozen=True, slots=True)
class Exit:
    """The user confirmed that the wizard should stop."""


SelectionResult = Union[Selected, ManualEntry, Back, Exit]


def regex_filter(pattern: str) -> NameFilter:
    """Return a name filter matching ``pattern`` anywhere in the name."""

    compiled = re.compile(pattern)
    return lambda name: compiled.search(name) is not None


def exclude_names(*names: str) -> NameFilter:
    """Return a name filter rejecting ``names`` (case-insensitive)."""

    lowered = {name.lower() for name in names}
    return lambda name: name.lower() not in lowered


@dataclass(frozen=True, slots=True)
class NavigatorRequest:
    """Inputs for a single folder navigator invocation."""

    base_path: Path
    prompt: str
    name_filter: NameFilter | None = None
    allow_manual: bool = True
    return_full_path: bool = False


@dataclass(frozen=True, slots=True)
class SideSelection:
    """Resolved installation and character folders for one side (Live or PTR)."""

    install_dir: Path
    account: str
    realm: str
    character: str

    def render(self, template: str) -> Path:
        """Return ``template`` resolved below the installation directory."""

        relative = template.format(account=self.account, realm=self.realm, character=self.character)
        return self.install_dir / relative


@dataclass(frozen=True, slots=True)
class CopyManifestEntry:
    """One configuration item copied from Live to PTR."""

    label: str
    kind: EntryKind
    template: str
    alternates: tuple[str, ...] = ()

    def templates(self) -> tuple[str, ...]:
        return (self.template, *self.alternates)


class CopyAction(str, Enum):
    """Outcome of processing a manifest entry."""

    COPIED = "copied"
    OVERWRITTEN = "overwritten"
    MIRRORED = "mirrored"
    MERGED = "merged"
    SKIPPED = "skipped"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SyncReport:
    """Counts gathered while synchronising a directory tree."""

    copied: int = 0
    deleted: int = 0
    skipped: int = 0
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        text = f"{self.copied} copied, {self.deleted} deleted, {self.skipped} unchanged"
        if self.errors:
            text += f", {len(self.errors)} failed"
        return text


@dataclass(frozen=True, slots=True)
class EntryResult:
    """Result emitted for each manifest entry."""

    label: str
    source: Path | None
    destination: Path | None
    action: CopyAction
    details: str | None = None

    @property
    def completed(self) -> bool:
        return self.action not in (CopyAction.SKIPPED, CopyAction.MISSING, CopyAction.FAILED)
