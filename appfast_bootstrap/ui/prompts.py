"""
Prompters — how the install flow asks questions and reports progress.

``ClickPrompter`` talks to the terminal. ``ScriptedPrompter`` answers
from a list, so the whole flow can be driven without a TTY.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

import click


class Prompter(Protocol):
    def confirm(self, text: str, default: bool = False) -> bool: ...

    def ask(self, text: str, default: str | None = None) -> str: ...

    def choose(self, text: str, choices: Sequence[str], default: str) -> str: ...

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...


class ClickPrompter:
    """Interactive prompts on the terminal."""

    def confirm(self, text: str, default: bool = False) -> bool:
        return click.confirm(text, default=default)

    def ask(self, text: str, default: str | None = None) -> str:
        value = click.prompt(text, default=default, show_default=default is not None)
        return str(value).strip()

    def choose(self, text: str, choices: Sequence[str], default: str) -> str:
        return click.prompt(
            text,
            type=click.Choice(list(choices), case_sensitive=False),
            default=default,
            show_choices=True,
        )

    def info(self, message: str) -> None:
        click.echo(message)

    def success(self, message: str) -> None:
        click.secho(message, fg="green")

    def warn(self, message: str) -> None:
        click.secho(message, fg="yellow")


class ScriptedPrompter:
    """Answers prompts from a fixed script and records everything shown.

    Confirm answers are bools; ``ask`` answers are strings, where
    ``None`` means "accept the default".
    """

    def __init__(self, answers: Iterable[bool | str | None] = ()):
        self._answers = list(answers)
        self.questions: list[str] = []
        self.messages: list[str] = []

    @property
    def remaining(self) -> int:
        return len(self._answers)

    def _next(self, text: str) -> bool | str | None:
        self.questions.append(text)
        if not self._answers:
            raise AssertionError(f"No scripted answer left for prompt: {text!r}")
        return self._answers.pop(0)

    def confirm(self, text: str, default: bool = False) -> bool:
        answer = self._next(text)
        return default if answer is None else bool(answer)

    def ask(self, text: str, default: str | None = None) -> str:
        answer = self._next(text)
        if answer is None:
            return default or ""
        return str(answer).strip()

    def choose(self, text: str, choices: Sequence[str], default: str) -> str:
        answer = self._next(text)
        if answer is None:
            return default
        if answer not in choices:
            raise AssertionError(f"Scripted answer {answer!r} not in {list(choices)}")
        return str(answer)

    def info(self, message: str) -> None:
        self.messages.append(message)

    def success(self, message: str) -> None:
        self.messages.append(message)

    def warn(self, message: str) -> None:
        self.messages.append(message)

    @property
    def transcript(self) -> str:
        return "\n".join(self.messages)
