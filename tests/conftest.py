from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from ptrsync.models import SideSelection
from ptrsync.prompts import Prompter


@pytest.fixture
def fake_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@dataclass
class ScriptedSession:
    """A prompter fed from a fixed list of answers, with captured output."""

    answers: list[str]
    prompts: list[str] = field(default_factory=list)
    buffer: io.StringIO = field(default_factory=io.StringIO)

    def __post_init__(self) -> None:
        console = Console(file=self.buffer, width=200, color_system=None)
        self.prompter = Prompter(console, self._answer)

    def _answer(self, text: str) -> str:
        self.prompts.append(text)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {text!r}")
        return self.answers.pop(0)

    @property
    def output(self) -> str:
        return self.buffer.getvalue()


@pytest.fixture
def session() -> Callable[..., ScriptedSession]:
    def factory(*answers: str) -> ScriptedSession:
        return ScriptedSession(list(answers))

    return factory


def build_install(
    root: Path,
    flavour: str,
    *,
    account: str = "ACCOUNT1",
    realm: str = "Silvermoon",
    character: str = "Hero",
) -> SideSelection:
    """Create the folder skeleton of one installation below ``root``."""

    install = root / flavour
    (install / "WTF" / "Account" / account / realm / character).mkdir(parents=True)
    (install / "Interface").mkdir(parents=True, exist_ok=True)
    return SideSelection(install_dir=install, account=account, realm=realm, character=character)


def populate_live(side: SideSelection) -> None:
    """Write every manifest item into a Live installation."""

    account_dir = side.install_dir / "WTF" / "Account" / side.account
    character_dir = account_dir / side.realm / side.character

    addon = side.install_dir / "Interface" / "AddOns" / "Bagnon"
    addon.mkdir(parents=True)
    (addon / "Bagnon.toc").write_text("## Title: Bagnon\n")
    (side.install_dir / "Interface" / "AddOns" / "EmptyAddon").mkdir()

    (account_dir / "SavedVariables").mkdir(parents=True)
    (account_dir / "SavedVariables" / "Bagnon.lua").write_text("BagnonDB = {}\n")
    (character_dir / "SavedVariables").mkdir(parents=True)
    (character_dir / "SavedVariables" / "Bagnon.lua").write_text("BagnonCharDB = {}\n")

    (side.install_dir / "WTF" / "Config.wtf").write_text('SET gxWindow "1"\n')
    (character_dir / "config-cache.wtf").write_text('SET autoLootDefault "1"\n')
    (account_dir / "bindings-cache.wtf").write_text("BINDINGMODE 0\n")
    (character_dir / "bindings-cache.wtf").write_text("BINDINGMODE 1\n")
    (account_dir / "macros-cache.txt").write_text('MACRO 1 "Mount" INV_Misc_QuestionMark\nEND\n')
    (character_dir / "macros-cache.txt").write_text('MACRO 2 "Heal" INV_Misc_QuestionMark\nEND\n')


@pytest.fixture
def make_install() -> Callable[..., SideSelection]:
    return build_install


@pytest.fixture
def populate() -> Callable[[SideSelection], None]:
    return populate_live
