from __future__ import annotations

from pathlib import Path

import pytest

from ptrsync.chain import SelectionChain, WizardExit, resolve_install_dir, resolve_side
from ptrsync.models import SideSelection


def _account_root(install: Path) -> Path:
    return install / "WTF" / "Account"


def _branching_install(tmp_path: Path) -> Path:
    install = tmp_path / "_retail_"
    root = _account_root(install)
    (root / "ACCOUNT1" / "Area52" / "Hero").mkdir(parents=True)
    (root / "ACCOUNT1" / "Zuljin" / "Villain").mkdir(parents=True)
    (root / "ACCOUNT1" / "SavedVariables").mkdir(parents=True)
    (root / "ACCOUNT2" / "Tichondrius" / "Alt").mkdir(parents=True)
    return install


def test_chain_resolves_three_steps(tmp_path: Path, session) -> None:
    install = _branching_install(tmp_path)
    scripted = session("0", "1", "0")

    chain = SelectionChain(install, "Live", scripted.prompter)

    assert chain.resolve() == ("ACCOUNT1", "Zuljin", "Villain")
    assert chain.resolved == ("ACCOUNT1", "Zuljin", "Villain")


def test_realm_listing_excludes_saved_variables(tmp_path: Path, session) -> None:
    install = _branching_install(tmp_path)
    scripted = session("0", "0", "0")

    SelectionChain(install, "Live", scripted.prompter).resolve()

    assert "SavedVariables" not in scripted.output
    assert "[0] Area52" in scripted.output


def test_back_at_first_step_warns_and_reprompts(tmp_path: Path, session) -> None:
    install = _branching_install(tmp_path)
    scripted = session("b", "1", "0", "0")

    result = SelectionChain(install, "Live", scripted.prompter).resolve()

    assert result == ("ACCOUNT2", "Tichondrius", "Alt")
    assert "cannot go back from the first selection" in scripted.output
    assert scripted.output.count("Select the Live account") == 2


def test_back_at_character_returns_to_realm_only(tmp_path: Path, session) -> None:
    install = _branching_install(tmp_path)
    scripted = session("0", "0", "b", "1", "0")

    result = SelectionChain(install, "Live", scripted.prompter).resolve()

    assert result == ("ACCOUNT1", "Zuljin", "Villain")
    assert scripted.output.count("Select the Live account") == 1
    assert scripted.output.count("Select the Live realm") == 2
    assert scripted.output.count("Select the Live character") == 2


def test_back_at_realm_returns_to_account(tmp_path: Path, session) -> None:
    install = _branching_install(tmp_path)
    scripted = session("0", "b", "1", "0", "0")

    result = SelectionChain(install, "PTR", scripted.prompter).resolve()

    assert result == ("ACCOUNT2", "Tichondrius", "Alt")
    assert scripted.output.count("Select the PTR account") == 2


def test_manual_realm_missing_folder_backtracks(tmp_path: Path, session) -> None:
    install = _branching_install(tmp_path)
    # A manually typed realm that does not exist makes the character step soft-fail back to the realm step.
    scripted = session("0", "m", "Ghostlands", "0", "0")

    result = SelectionChain(install, "Live", scripted.prompter).resolve()

    assert result == ("ACCOUNT1", "Area52", "Hero")
    assert "does not exist" in scripted.output


def test_exit_raises_wizard_exit(tmp_path: Path, session) -> None:
    install = _branching_install(tmp_path)
    scripted = session("0", "x", "y")

    with pytest.raises(WizardExit):
        SelectionChain(install, "Live", scripted.prompter).resolve()


def test_missing_account_root_returns_none(tmp_path: Path, session) -> None:
    scripted = session()

    assert SelectionChain(tmp_path / "_ptr_", "PTR", scripted.prompter).resolve() is None
    assert scripted.prompts == []


def test_chains_are_independent(tmp_path: Path, session) -> None:
    install = _branching_install(tmp_path)
    live = SelectionChain(install, "Live", session("0", "0", "0").prompter)
    ptr = SelectionChain(install, "PTR", session("1", "0", "0").prompter)

    assert live.resolve() == ("ACCOUNT1", "Area52", "Hero")
    assert ptr.resolve() == ("ACCOUNT2", "Tichondrius", "Alt")
    assert live.resolved == ("ACCOUNT1", "Area52", "Hero")


def test_resolve_install_dir_filters_flavours(tmp_path: Path, session) -> None:
    root = tmp_path / "World of Warcraft"
    for name in ("_retail_", "_ptr_", "Data", "Launcher"):
        (root / name).mkdir(parents=True)
    scripted = session("b", "1")

    result = resolve_install_dir(root, "Live", scripted.prompter)

    assert result == root / "_retail_"
    assert "Data" not in scripted.output
    assert "cannot go back" in scripted.output


def test_resolve_install_dir_missing_root_asks_manually(tmp_path: Path, session) -> None:
    custom = tmp_path / "Games" / "_xptr_"
    scripted = session("", str(custom))

    result = resolve_install_dir(tmp_path / "missing", "PTR", scripted.prompter)

    assert result == custom


def test_resolve_install_dir_exit(tmp_path: Path, session) -> None:
    root = tmp_path / "wow"
    (root / "_retail_").mkdir(parents=True)

    with pytest.raises(WizardExit):
        resolve_install_dir(root, "Live", session("x", "y").prompter)


def test_resolve_side_retries_installation_without_accounts(tmp_path: Path, session) -> None:
    root = tmp_path / "wow"
    (root / "_classic_").mkdir(parents=True)
    (_account_root(root / "_retail_") / "ACC" / "Realm" / "Char").mkdir(parents=True)
    scripted = session("0", "1", "0", "0", "0")

    result = resolve_side(root, "Live", scripted.prompter)

    assert result == SideSelection(root / "_retail_", "ACC", "Realm", "Char")
    assert "No account folder found" in scripted.output
