"""High level orchestration: run the copy manifest from Live to PTR."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .filesystem import sync_tree
from .manifest import locate_source, select_entries
from .models import (
    CopyAction,
    CopyManifestEntry,
    DirectorySyncMode,
    EntryKind,
    EntryResult,
    OverwritePolicy,
    SideSelection,
)
from .policy import copy_file, resolve_switches
from .prompts import Prompter


class SyncManager:
    """Processes every manifest entry in order; a failing entry never stops the batch."""

    def __init__(
        self,
        live: SideSelection,
        ptr: SideSelection,
        policy: OverwritePolicy,
        prompter: Prompter,
    ) -> None:
        self.live = live
        self.ptr = ptr
        self.policy = policy
        self.prompter = prompter

    def run(self, labels: Iterable[str] | None = None) -> list[EntryResult]:
        results: list[EntryResult] = []
        for entry in select_entries(labels):
            results.append(self._run_entry(entry))
        return results

    # ------------------------------------------------------------------
    # Internal helpers

    def _run_entry(self, entry: CopyManifestEntry) -> EntryResult:
        located = locate_source(entry, self.live)
        if located is None:
            missing = self.live.render(entry.template)
            self.prompter.warn(f"{entry.label}: '{missing}' not found on Live, skipping.")
            return EntryResult(
                label=entry.label,
                source=missing,
                destination=None,
                action=CopyAction.MISSING,
                details="Source not found",
            )

        template, source = located
        destination = self.ptr.render(template)
        self.prompter.info(f"{entry.label}: {source} -> {destination}")

        try:
            if entry.kind is EntryKind.DIRECTORY_TREE:
                return self._sync_directory(entry, source, destination)
            action = copy_file(self.policy, source, destination, self.prompter)
        except OSError as exc:
            self.prompter.error(f"{entry.label}: {exc}")
            return EntryResult(entry.label, source, destination, CopyAction.FAILED, str(exc))

        details = "Existing file kept" if action is CopyAction.SKIPPED else None
        return EntryResult(entry.label, source, destination, action, details)

    def _sync_directory(self, entry: CopyManifestEntry, source: Path, destination: Path) -> EntryResult:
        mode = resolve_switches(self.policy, entry.label, self.prompter)
        report = sync_tree(source, destination, mode)

        for message in report.errors:
            self.prompter.warn(f"{entry.label}: {message}")

        if not report.ok:
            action = CopyAction.FAILED
        elif mode is DirectorySyncMode.MIRROR:
            action = CopyAction.MIRRORED
        else:
            action = CopyAction.MERGED
        return EntryResult(entry.label, source, destination, action, report.summary())
