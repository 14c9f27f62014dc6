from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .codeowners_file import Rule, parse_codeowners_text
from .patterns import PathLike, to_text


@dataclass(frozen=True)
class Match:
    path: str
    chosen: Rule | None
    matches: list[Rule]

    @property
    def owners(self) -> list[str]:
        return list(self.chosen.owners) if self.chosen else []


class OwnershipIndex:
    """In-memory index for CODEOWNERS rules.

    Rules are kept last-declared first, so the first hit of a forward scan is
    the last matching declaration in the file.
    """

    def __init__(self, rules: Iterable[Rule]):
        self._rules = tuple(reversed(list(rules)))

    @classmethod
    def from_text(cls, text: str | Iterable[str], source: str = "CODEOWNERS") -> "OwnershipIndex":
        return cls(parse_codeowners_text(text, source=source))

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def find_owners(self, path: PathLike) -> list[str]:
        for r in self._rules:
            if r.matches(path):
                return list(r.owners)
        return []

    def is_owned_by(self, path: PathLike, owner: str) -> bool:
        return owner in self.find_owners(path)

    def match(self, path: PathLike) -> Match:
        """All matching rules in declaration order, plus the one that wins."""
        matches = [r for r in self._rules if r.matches(path)]
        chosen = matches[0] if matches else None
        matches.reverse()
        return Match(path=to_text(path), chosen=chosen, matches=matches)


class OwnerQuery:
    """Read-only ownership lookups handed to the command layer."""

    def __init__(self, index: OwnershipIndex):
        self._index = index

    def find_owners(self, path: PathLike) -> list[str]:
        return self._index.find_owners(path)

    def is_owned_by(self, path: PathLike, owner: str) -> bool:
        return self._index.is_owned_by(path, owner)
