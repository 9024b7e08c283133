"""Installation and account/realm/character selection with backtracking."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .models import (
    Back,
    Exit,
    NameFilter,
    NavigatorRequest,
    SideSelection,
    exclude_names,
    regex_filter,
)
from .navigator import navigate
from .prompts import Prompter

ACCOUNT_SUFFIX = Path("WTF") / "Account"
INSTALL_FILTER = r"^_"


class WizardExit(RuntimeError):
    """Raised when the user confirms that the wizard should stop."""


@dataclass(frozen=True, slots=True)
class ChainStep:
    key: str
    prompt: str
    name_filter: NameFilter | None = None


CHAIN_STEPS: tuple[ChainStep, ...] = (
    ChainStep("account", "Select the {side} account"),
    ChainStep("realm", "Select the {side} realm", exclude_names("SavedVariables")),
    ChainStep("character", "Select the {side} character"),
)


class SelectionChain:
    """Resolves account, realm and character below an installation directory.

    Resolved names live on an explicit stack: ``Back`` at step ``i`` pops the
    value of step ``i - 1`` so that step is asked again before step ``i``.
    """

    def __init__(self, install_dir: Path, side: str, prompter: Prompter, *, strict: bool = False) -> None:
        self.install_dir = Path(install_dir)
        self.side = side
        self.prompter = prompter
        self.strict = strict
        self._stack: list[str] = []

    @property
    def account_root(self) -> Path:
        return self.install_dir / ACCOUNT_SUFFIX

    @property
    def resolved(self) -> tuple[str, ...]:
        return tuple(self._stack)

    def base_path(self) -> Path:
        """Base path of the step currently on top of the stack."""

        return self.account_root.joinpath(*self._stack)

    def resolve(self) -> tuple[str, str, str] | None:
        """Run the chain; return ``None`` when the account folder is missing."""

        self._stack.clear()
        while len(self._stack) < len(CHAIN_STEPS):
            depth = len(self._stack)
            step = CHAIN_STEPS[depth]
            base = self.base_path()
            request = NavigatorRequest(
                base_path=base,
                prompt=step.prompt.format(side=self.side),
                name_filter=step.name_filter,
                allow_manual=True,
                return_full_path=False,
            )
            result = navigate(request, self.prompter, strict=self.strict)

            if isinstance(result, Exit):
                raise WizardExit(f"Exit requested during {self.side} {step.key} selection")
            if isinstance(result, Back):
                if depth == 0:
                    if not base.is_dir():
                        return None
                    self.prompter.warn("You cannot go back from the first selection.")
                    continue
                self._stack.pop()
                continue

            self._stack.append(result.value)

        account, realm, character = self._stack
        return account, realm, character


def resolve_install_dir(root: Path, side: str, prompter: Prompter, *, strict: bool = False) -> Path:
    """Pick a game installation (``_retail_``, ``_ptr_``...) below ``root``."""

    while True:
        if not Path(root).is_dir():
            prompter.warn(f"Installation root '{root}' does not exist.")
            manual = prompter.ask(f"Enter the {side} installation folder: ").strip()
            if not manual:
                continue
            candidate = Path(manual).expanduser()
            if strict and not candidate.is_dir():
                prompter.warn(f"Folder '{candidate}' does not exist.")
                continue
            return candidate

        request = NavigatorRequest(
            base_path=Path(root),
            prompt=f"Select the {side} installation",
            name_filter=regex_filter(INSTALL_FILTER),
            allow_manual=True,
            return_full_path=True,
        )
        result = navigate(request, prompter, strict=strict)
        if isinstance(result, Exit):
            raise WizardExit(f"Exit requested during {side} installation selection")
        if isinstance(result, Back):
            prompter.warn("You cannot go back from the first selection.")
            continue
        return Path(result.value)


def resolve_side(root: Path, side: str, prompter: Prompter, *, strict: bool = False) -> SideSelection:
    """Resolve the installation and account/realm/character for one side."""

    while True:
        install_dir = resolve_install_dir(root, side, prompter, strict=strict)
        chain = SelectionChain(install_dir, side, prompter, strict=strict)
        resolved = chain.resolve()
        if resolved is None:
            prompter.warn(f"No account folder found in '{install_dir}'. Choose another installation.")
            continue
        account, realm, character = resolved
        return SideSelection(install_dir=install_dir, account=account, realm=realm, character=character)
