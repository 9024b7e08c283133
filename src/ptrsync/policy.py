"""Overwrite policy selection and per-operation resolution."""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from .filesystem import copy_single
from .models import CopyAction, DirectorySyncMode, OverwritePolicy
from .prompts import PromptOutcome, Prompter

POLICY_CHOICES: dict[str, tuple[OverwritePolicy, str]] = {
    "1": (OverwritePolicy.MIRROR_ALL, "Overwrite everything (mirror Live onto PTR, deleting extra files)"),
    "2": (OverwritePolicy.ADDITIVE_ONLY, "Only copy files missing on PTR (never overwrite or delete)"),
    "3": (OverwritePolicy.ASK_PER_OPERATION, "Ask for every item"),
}


def choose_policy(prompter: Prompter) -> OverwritePolicy:
    """Ask the user for the global overwrite policy."""

    prompter.say("[bold]How should existing PTR files be handled?[/bold]")
    for key, (_, description) in POLICY_CHOICES.items():
        prompter.say(escape(f"  [{key}] {description}"))

    def step(raw: str) -> PromptOutcome[OverwritePolicy]:
        choice = POLICY_CHOICES.get(raw.strip())
        if choice is None:
            prompter.warn("Invalid selection, please try again.")
            return PromptOutcome.prompting()
        return PromptOutcome.accepted(choice[0])

    return prompter.run("Selection: ", step).unwrap()


def resolve_switches(policy: OverwritePolicy, label: str, prompter: Prompter) -> DirectorySyncMode:
    """Return the directory sync mode for one operation.

    ``ASK_PER_OPERATION`` prompts on every call; nothing is remembered between calls.
    """

    if policy is OverwritePolicy.MIRROR_ALL:
        return DirectorySyncMode.MIRROR
    if policy is OverwritePolicy.ADDITIVE_ONLY:
        return DirectorySyncMode.ADDITIVE_ONLY
    if prompter.confirm(f"Mirror {label} (overwrite and delete extra files on PTR)?"):
        return DirectorySyncMode.MIRROR
    return DirectorySyncMode.ADDITIVE_ONLY


def copy_file(policy: OverwritePolicy, source: Path, destination: Path, prompter: Prompter) -> CopyAction:
    """Copy a single existing ``source`` file according to ``policy``."""

    exists = destination.exists()
    if not exists:
        # A dangling link is not an existing file; replace it.
        copy_single(source, destination, overwrite=True)
        return CopyAction.COPIED

    if policy is OverwritePolicy.MIRROR_ALL:
        overwrite = True
    elif policy is OverwritePolicy.ADDITIVE_ONLY:
        overwrite = False
    else:
        overwrite = prompter.confirm(f"'{destination}' already exists. Overwrite it?")

    if not overwrite:
        prompter.info(f"Keeping existing '{destination}'.")
        return CopyAction.SKIPPED

    copy_single(source, destination, overwrite=True)
    return CopyAction.OVERWRITTEN
