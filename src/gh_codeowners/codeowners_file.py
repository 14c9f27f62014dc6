from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .errors import InvalidPatternError, ParseError, PatternParseError
from .patterns import CompiledPattern, compile_pattern

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    pattern: str
    owners: tuple[str, ...]
    line: int
    source: str

    compiled: CompiledPattern

    def matches(self, path: str | bytes) -> bool:
        return self.compiled.matches(path)


def split_owners(tokens: list[str]) -> list[str]:
    """Owner tokens up to (not including) the first inline ``#`` comment."""
    owners: list[str] = []
    for tok in tokens:
        if tok.startswith("#"):
            break
        owners.append(tok)
    return owners


def _lines(text: str | Iterable[str]) -> Iterable[str]:
    if isinstance(text, str):
        return text.splitlines()
    return (raw.rstrip("\r\n") for raw in text)


def parse_codeowners_text(text: str | Iterable[str], source: str = "CODEOWNERS") -> list[Rule]:
    """Parse CODEOWNERS content into rules, in declaration order.

    Lines that start with ``#`` and lines with no owner token are skipped.
    A single bad pattern fails the whole file.
    """
    rules: list[Rule] = []
    for idx, raw in enumerate(_lines(text), start=1):
        line = raw.strip()
        if line.startswith("#"):
            continue

        parts = line.split()
        if len(parts) < 2:
            continue

        pat = parts[0]
        try:
            compiled = compile_pattern(pat)
        except InvalidPatternError as e:
            raise PatternParseError(
                f"{source}:{idx}: could not build pattern '{pat}': {e.reason}",
                pattern=pat,
                reason=e.reason,
                line=idx,
            ) from e

        owners = tuple(split_owners(parts[1:]))
        rules.append(Rule(pattern=pat, owners=owners, line=idx, source=source, compiled=compiled))

    log.debug("parsed %d rules from %s", len(rules), source)
    return rules


def load_codeowners(path: Path) -> list[Rule]:
    if not path.exists():
        raise ParseError(f"CODEOWNERS file not found: {path}")
    try:
        txt = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(f"Failed to read CODEOWNERS: {path}: {e}") from e
    return parse_codeowners_text(txt, source=str(path))
