"""Command-line interface for ptrsync."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .chain import WizardExit, resolve_side
from .config import (
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_SNAPSHOT_FILENAME,
    ConfigError,
    SavedSelection,
    Settings,
    default_install_root,
    load_settings,
    load_snapshot,
    render_config,
    save_snapshot,
)
from .manager import SyncManager
from .manifest import MANIFEST, ManifestError, select_entries
from .models import CopyAction, EntryResult, OverwritePolicy, SideSelection
from .policy import choose_policy
from .prompts import Prompter

app = typer.Typer(help="Copy game configuration from a Live installation to a PTR installation")
console = Console()


def _handle_error(exc: Exception) -> None:
    if isinstance(exc, WizardExit):
        console.print("[yellow]Exiting.[/yellow]")
        raise typer.Exit(code=1)
    if isinstance(exc, EOFError):
        console.print("\n[red]Input closed before the wizard finished.[/red]")
        raise typer.Exit(code=1)
    if isinstance(exc, PermissionError):
        console.print("[red]Permission denied.[/red] Re-run the command with elevated privileges.")
        raise typer.Exit(code=1)
    if isinstance(exc, (ConfigError, ManifestError)):
        message = str(exc)
        console.print(f"[red]{escape(message)}[/red]")
        if "does not exist" in message:
            console.print("[yellow]Use 'ptrsync init --config <path>' to create a configuration file.[/yellow]")
        raise typer.Exit(code=1)
    raise exc


def _format_side(title: str, side: SideSelection) -> str:
    return escape(f"{title}: {side.install_dir} / {side.account} / {side.realm} / {side.character}")


ACTION_STYLES = {
    CopyAction.COPIED: "green",
    CopyAction.OVERWRITTEN: "green",
    CopyAction.MIRRORED: "green",
    CopyAction.MERGED: "green",
    CopyAction.SKIPPED: "yellow",
    CopyAction.MISSING: "yellow",
    CopyAction.FAILED: "red",
}


def _format_results(results: Iterable[EntryResult]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entry")
    table.add_column("Action")
    table.add_column("Source", overflow="fold")
    table.add_column("Details", overflow="fold")

    for result in results:
        style = ACTION_STYLES.get(result.action, "white")
        table.add_row(
            escape(result.label),
            f"[{style}]{result.action.value}[/{style}]",
            escape(str(result.source)) if result.source else "",
            escape(result.details or ""),
        )

    console.print(table)


def _resolve_selection(settings: Settings, prompter: Prompter, *, strict: bool) -> tuple[SideSelection, SideSelection]:
    snapshot_path = settings.snapshot_path
    if snapshot_path.exists():
        saved = load_snapshot(snapshot_path)
        if saved is None:
            prompter.warn(f"Saved selection '{snapshot_path}' is incomplete or unreadable.")
            if not prompter.confirm("Continue with the interactive wizard?"):
                raise WizardExit("Saved selection could not be imported")
        else:
            prompter.say(_format_side("Live", saved.live()))
            prompter.say(_format_side("PTR", saved.ptr()))
            if prompter.confirm("Use the saved selection?"):
                return saved.live(), saved.ptr()

    live = resolve_side(settings.install_root, "Live", prompter, strict=strict)
    ptr = resolve_side(settings.install_root, "PTR", prompter, strict=strict)

    if prompter.confirm(f"Save this selection to '{snapshot_path}'?"):
        save_snapshot(snapshot_path, SavedSelection.from_sides(live, ptr))
        prompter.success(f"Saved selection to '{snapshot_path}'.")

    return live, ptr


def run_wizard(
    settings: Settings,
    prompter: Prompter,
    *,
    strict: bool | None = None,
    labels: Iterable[str] | None = None,
) -> list[EntryResult]:
    """Resolve both sides, pick a policy and copy every manifest entry."""

    if labels is not None:
        labels = [entry.label for entry in select_entries(labels)]
    strict_mode = settings.strict_manual_entry if strict is None else strict
    live, ptr = _resolve_selection(settings, prompter, strict=strict_mode)
    policy = settings.policy or choose_policy(prompter)

    prompter.say(_format_side("Live", live))
    prompter.say(_format_side("PTR", ptr))
    prompter.say(f"Policy: [bold]{policy.value}[/bold]")

    manager = SyncManager(live, ptr, policy, prompter)
    results = manager.run(labels)
    _format_results(results)

    incomplete = [result for result in results if not result.completed]
    if incomplete:
        prompter.warn(f"Finished with {len(incomplete)} of {len(results)} item(s) skipped or failed.")
    else:
        prompter.success("All items copied.")
    return results


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to ptrsync.toml"),
    strict: bool | None = typer.Option(
        None,
        "--strict/--no-strict",
        help="Reject manually entered folders that do not exist",
    ),
    only: list[str] = typer.Option(None, "--only", help="Limit the copy to specific manifest entries"),
) -> None:
    """Run the interactive Live to PTR copy wizard."""

    if ctx.invoked_subcommand is not None:
        return

    try:
        settings = load_settings(config)
        run_wizard(settings, Prompter(console), strict=strict, labels=only or None)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)


@app.command()
def init(
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILENAME),
        "--config",
        "-c",
        help="Path to write the configuration file",
        dir_okay=False,
        writable=True,
    ),
    install_root: str = typer.Option(
        None,
        "--install-root",
        help="Game installation root containing _retail_, _ptr_ and similar folders",
    ),
    policy: OverwritePolicy = typer.Option(
        None,
        "--policy",
        help="Default overwrite policy; omit to choose at every run",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite existing config if present"),
) -> None:
    """Create a starter ptrsync configuration file."""

    if config.exists() and not force:
        console.print(f"[red]Configuration '{escape(str(config))}' already exists. Use --force to overwrite.[/red]")
        raise typer.Exit(code=1)

    config.parent.mkdir(parents=True, exist_ok=True)
    text = render_config(
        install_root=install_root or str(default_install_root()),
        snapshot_path=f"./{DEFAULT_SNAPSHOT_FILENAME}",
        policy=policy,
    )
    config.write_text(text)
    console.print(f"[green]Created '{escape(str(config))}'.[/green]")


@app.command("manifest")
def show_manifest() -> None:
    """List the items copied from Live to PTR."""

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entry")
    table.add_column("Kind")
    table.add_column("Path", overflow="fold")

    for entry in MANIFEST:
        table.add_row(escape(entry.label), entry.kind.value, escape(" | ".join(entry.templates())))

    console.print(table)


def run() -> None:
    """Entry point used for console_script bindings."""

    app()
