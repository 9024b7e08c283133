"""Indexed folder picker used by every selection step."""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from .models import Back, Exit, ManualEntry, NameFilter, NavigatorRequest, Selected, SelectionResult
from .prompts import PromptOutcome, Prompter, PromptState

BACK_MARKER = "B"
EXIT_MARKER = "X"
MANUAL_MARKER = "M"


def list_folders(base_path: Path, name_filter: NameFilter | None = None) -> list[str]:
    """Return immediate subdirectory names of ``base_path``, sorted case-insensitively."""

    try:
        children = list(base_path.iterdir())
    except (FileNotFoundError, NotADirectoryError):
        return []

    names = [child.name for child in children if child.is_dir()]
    if name_filter is not None:
        names = [name for name in names if name_filter(name)]
    return sorted(names, key=lambda name: (name.casefold(), name))


def navigate(request: NavigatorRequest, prompter: Prompter, *, strict: bool = False) -> SelectionResult:
    """Show the folders below ``request.base_path`` and return the user's choice.

    A missing base path yields ``Back`` without prompting. ``Exit`` is only
    returned after the user confirms it. With ``strict`` a manual entry must
    point at an existing folder.
    """

    base = request.base_path
    if not base.is_dir():
        prompter.warn(f"Folder '{base}' does not exist.")
        return Back()

    folders = list_folders(base, request.name_filter)
    _render_menu(request, folders, prompter)

    def step(raw: str) -> PromptOutcome[SelectionResult]:
        answer = raw.strip()
        marker = answer.upper()

        if marker == BACK_MARKER:
            return PromptOutcome.accepted(Back())
        if marker == EXIT_MARKER:
            if prompter.confirm("Are you sure you want to exit?"):
                return PromptOutcome.cancelled()
            return PromptOutcome.prompting()
        if request.allow_manual and marker == MANUAL_MARKER:
            manual = _manual_entry(request, prompter, strict=strict)
            if manual is None:
                return PromptOutcome.prompting()
            return PromptOutcome.accepted(manual)

        # Plain ASCII digits only.
        if folders and answer.isascii() and answer.isdecimal():
            index = int(answer)
            if index < len(folders):
                return PromptOutcome.accepted(Selected(_shape(request, folders[index])))

        prompter.warn("Invalid selection, please try again.")
        return PromptOutcome.prompting()

    outcome = prompter.run("Selection: ", step)
    if outcome.state is PromptState.CANCELLED:
        return Exit()
    return outcome.unwrap()


def _render_menu(request: NavigatorRequest, folders: list[str], prompter: Prompter) -> None:
    prompter.say(f"[bold]{escape(request.prompt)}[/bold]")
    if folders:
        for index, name in enumerate(folders):
            prompter.say(escape(f"  [{index}] {name}"))
    else:
        prompter.warn(f"No matching folders found in '{request.base_path}'.")

    markers = [f"[{BACK_MARKER}] Back", f"[{EXIT_MARKER}] Exit"]
    if request.allow_manual:
        markers.append(f"[{MANUAL_MARKER}] Enter manually")
    prompter.say(escape("  " + "  ".join(markers)))


def _shape(request: NavigatorRequest, name: str) -> str:
    if request.return_full_path:
        return str(request.base_path / name)
    return name


def _manual_entry(request: NavigatorRequest, prompter: Prompter, *, strict: bool) -> ManualEntry | None:
    raw = prompter.ask("Enter the folder manually: ").strip()
    if not raw:
        prompter.warn("No folder entered.")
        return None

    if request.return_full_path:
        candidate = Path(raw).expanduser()
        resolved = candidate if candidate.is_absolute() else request.base_path / candidate
        value = str(resolved)
    else:
        resolved = request.base_path / raw
        value = raw

    if strict and not resolved.is_dir():
        prompter.warn(f"Folder '{resolved}' does not exist.")
        return None
    return ManualEntry(value)
