from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .errors import UsageError


@dataclass(frozen=True)
class Team:
    org: str
    name: str

    @staticmethod
    def parse(value: str) -> "Team":
        if not value.startswith("@"):
            raise UsageError(f"team '{value}' is missing @ at the beginning")
        parts = value[1:].split("/")
        if len(parts) != 2 or not all(parts):
            raise UsageError(f"team '{value}' cannot be split in two by /")
        return Team(org=parts[0], name=parts[1])

    @property
    def short_name(self) -> str:
        return self.name

    @property
    def full_name(self) -> str:
        return f"@{self.org}/{self.name}"


def find_prefix_length(values: Sequence[str]) -> int:
    """Length of the longest prefix shared by every value."""
    if not values:
        return 0
    ordered = sorted(values)
    first, last = ordered[0], ordered[-1]
    n = 0
    for a, b in zip(first, last):
        if a != b:
            break
        n += 1
    return n


def _fallback_name(owner: str) -> str:
    try:
        return Team.parse(owner).short_name
    except UsageError:
        return owner.lstrip("@")


def build_short_names(owners: Sequence[str]) -> dict[str, str]:
    """Strip the prefix and suffix every owner shares.

    ``@my-org/team-one-dev`` and ``@my-org/team-two-dev`` become ``one`` and
    ``two``.
    """
    if len(owners) < 2:
        raise ValueError("build_short_names needs at least two owners")

    prefix = find_prefix_length(owners)
    suffix = find_prefix_length([o[::-1] for o in owners])

    out: dict[str, str] = {}
    for owner in owners:
        name = owner[prefix : len(owner) - suffix]
        out[owner] = name or _fallback_name(owner)
    return out
