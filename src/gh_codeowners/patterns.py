from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from .errors import InvalidPatternError

log = logging.getLogger(__name__)

SEP = "/"

PathLike = Union[str, bytes]


def to_text(path: PathLike) -> str:
    if isinstance(path, bytes):
        return path.decode("utf-8", errors="surrogateescape")
    return path


@dataclass(frozen=True)
class CompiledPattern:
    raw: str
    regex: re.Pattern[str]

    def matches(self, path: PathLike) -> bool:
        return self.regex.match(to_text(path)) is not None


def _split_segments(pattern: str) -> list[str]:
    segs = pattern.split(SEP)

    if segs[0] == "":
        # Leading slash: anchored to the repo root
        segs = segs[1:]
    elif len(segs) == 1 or (len(segs) == 2 and segs[1] == ""):
        # A single segment matches at any depth, same as a leading **/
        if segs[0] != "**":
            segs = ["**", *segs]

    if len(segs) > 1 and segs[-1] == "":
        # Trailing slash is shorthand for "/**"
        segs[-1] = "**"

    return segs


def _literal_segment(seg: str) -> str:
    out: list[str] = []
    escape = False
    for ch in seg:
        if escape:
            escape = False
            out.append(re.escape(ch))
        elif ch == "\\":
            escape = True
        elif ch == "*":
            out.append(f"[^{SEP}]*")
        elif ch == "?":
            out.append(f"[^{SEP}]")
        else:
            out.append(re.escape(ch))
    return "".join(out)


def _glob_to_regex(pattern: str) -> str:
    """Translate a CODEOWNERS glob to an anchored regex.

    Follows git's pathspec rules as used for CODEOWNERS:
      - ``*``  any run of characters within one path segment
      - ``**`` any number of whole segments (leading, middle or trailing)
      - ``?``  one character within a segment
      - ``\\`` escapes the next character

    Character classes are not part of the CODEOWNERS grammar and are matched
    literally.
    """
    segs = _split_segments(pattern)
    last = len(segs) - 1
    need_sep = False

    out: list[str] = [r"\A"]
    for i, seg in enumerate(segs):
        if seg == "**":
            if i == 0 and i == last:
                out.append(".+")
            elif i == 0:
                out.append(f"(?:.+{SEP})?")
                need_sep = False
            elif i == last:
                out.append(f"{SEP}.*")
            else:
                out.append(f"(?:{SEP}.+)?")
                need_sep = True
            continue

        if need_sep:
            out.append(SEP)

        if seg == "*":
            out.append(f"[^{SEP}]+")
        else:
            out.append(_literal_segment(seg))
            if i == last:
                # Also match everything below a matched directory
                out.append(f"(?:{SEP}.*)?")

        need_sep = True

    out.append(r"\Z")
    return "".join(out)


# Memoises the pure pattern-to-regex step only; indexes are always rebuilt.
@lru_cache(maxsize=4096)
def compile_pattern(pattern: str) -> CompiledPattern:
    if "***" in pattern:
        raise InvalidPatternError(pattern, "pattern cannot contain three consecutive asterisks")
    if pattern == "":
        raise InvalidPatternError(pattern, "empty pattern")

    if pattern == SEP:
        # The repo root itself owns nothing
        rx = r"(?!)"
    else:
        rx = _glob_to_regex(pattern)

    try:
        compiled = re.compile(rx)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e

    log.debug("compiled pattern %r -> %s", pattern, rx)
    return CompiledPattern(raw=pattern, regex=compiled)
