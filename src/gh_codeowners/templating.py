from __future__ import annotations

from dataclasses import dataclass, field
from string import Formatter
from typing import Any

from .errors import UsageError
from .prompter import Prompter

PROMOTION = "Made by [`gh-codeowners`](https://github.com/justindbaur/gh-codeowners)"

RESERVED_FIELDS = ("team", "name", "number", "files", "count", "promote")


@dataclass
class TemplateData:
    """Values available to branch, commit and PR body templates for one team.

    Placeholders outside RESERVED_FIELDS are asked for once per team and
    reused by every later template rendered for that team.
    """

    team: str
    name: str
    number: int
    files: list[str]
    prompter: Prompter
    answers: dict[str, str] = field(default_factory=dict)

    def reserved(self) -> dict[str, Any]:
        return {
            "team": self.team,
            "name": self.name,
            "number": self.number,
            "files": "\n".join(self.files),
            "count": len(self.files),
            "promote": PROMOTION,
        }

    def ask(self, key: str) -> str:
        if key in self.answers:
            return self.answers[key]
        value = self.prompter.input(f"{self.name}: {key}", "")
        if not value:
            raise UsageError(f"value not supplied for '{key}' for team '{self.name}'")
        self.answers[key] = value
        return value


class _TeamFormatter(Formatter):
    def __init__(self, data: TemplateData):
        self.data = data
        self.values = data.reserved()

    def get_value(self, key: Any, args: Any, kwargs: Any) -> Any:
        if isinstance(key, int):
            raise UsageError("positional placeholders like '{}' are not supported")
        if key in self.values:
            return self.values[key]
        return self.data.ask(key)


def render(template: str, data: TemplateData) -> str:
    try:
        return _TeamFormatter(data).format(template)
    except (ValueError, IndexError, AttributeError, KeyError) as e:
        raise UsageError(f"invalid template {template!r}: {e}") from e


def check_template(template: str) -> None:
    """Fail early on templates that cannot be parsed at all."""
    try:
        list(Formatter().parse(template))
    except ValueError as e:
        raise UsageError(f"invalid template {template!r}: {e}") from e
