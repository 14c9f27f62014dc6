from __future__ import annotations

from typing import Protocol, Sequence

import click
from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from .errors import UsageError


class Prompter(Protocol):
    def input(self, prompt: str, default: str = "") -> str: ...

    def select(self, prompt: str, options: Sequence[str], default: int = 0) -> int: ...

    def edit(self, text: str) -> str: ...


class RichPrompter:
    """Interactive prompts on the terminal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def input(self, prompt: str, default: str = "") -> str:
        return Prompt.ask(prompt, default=default, console=self.console)

    def select(self, prompt: str, options: Sequence[str], default: int = 0) -> int:
        if not options:
            raise UsageError(f"nothing to choose from for: {prompt}")
        self.console.print(prompt)
        for i, opt in enumerate(options, start=1):
            self.console.print(f"  {i}. {opt}")
        choices = [str(i) for i in range(1, len(options) + 1)]
        picked = IntPrompt.ask("Choice", choices=choices, default=default + 1, console=self.console)
        return picked - 1

    def edit(self, text: str) -> str:
        # click.edit returns None when the editor exits without saving.
        edited = click.edit(text, extension=".md", require_save=False)
        return text if edited is None else edited
