"""Console prompting with an injectable input source."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

from rich.console import Console
from rich.markup import escape

T = TypeVar("T")

YES_ANSWERS = frozenset({"y", "yes"})


class PromptState(str, Enum):
    """States of a single interactive prompt."""

    PROMPTING = "prompting"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PromptOutcome(Generic[T]):
    state: PromptState
    value: T | None = None

    @classmethod
    def accepted(cls, value: T) -> "PromptOutcome[T]":
        return cls(PromptState.ACCEPTED, value)

    @classmethod
    def cancelled(cls) -> "PromptOutcome[T]":
        return cls(PromptState.CANCELLED)

    @classmethod
    def prompting(cls) -> "PromptOutcome[T]":
        return cls(PromptState.PROMPTING)

    def unwrap(self) -> T:
        """Return the accepted value, raising if the prompt ended without one."""

        if self.state is not PromptState.ACCEPTED or self.value is None:
            raise RuntimeError(f"Prompt ended in state '{self.state.value}' without a value")
        return self.value



class Prompter:
    """Reads answers and writes messages through a shared ``Console``.

    ``input_func`` receives the rendered prompt text and returns the raw answer;
    it defaults to ``Console.input`` and is replaced by scripted answers in tests.
    """

    def __init__(self, console: Console | None = None, input_func: Callable[[str], str] | None = None) -> None:
        self.console = console or Console()
        self._input = input_func or (lambda text: self.console.input(escape(text)))

    def ask(self, text: str) -> str:
        return self._input(text)

    def confirm(self, question: str) -> bool:
        """Return ``True`` only for an explicit yes."""

        answer = self.ask(f"{question} [Y/N]: ")
        return answer.strip().lower() in YES_ANSWERS

    def run(self, text: str, step: Callable[[str], PromptOutcome[T]]) -> PromptOutcome[T]:
        """Ask ``text`` until ``step`` leaves the prompting state."""

        while True:
            outcome = step(self.ask(text))
            if outcome.state is not PromptState.PROMPTING:
                return outcome

    def say(self, message: str) -> None:
        self.console.print(message)

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]{escape(message)}[/cyan]")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def success(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]")
