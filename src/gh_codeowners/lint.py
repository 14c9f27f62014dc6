from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .codeowners_file import split_owners
from .errors import GitError, InvalidPatternError
from .gitutils import Git
from .patterns import CompiledPattern, compile_pattern

_TEAM_RE = re.compile(r"^@[A-Za-z0-9][A-Za-z0-9-]*/[A-Za-z0-9_.-]+$")
_USER_RE = re.compile(r"^@[A-Za-z0-9][A-Za-z0-9-]*$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Issue:
    severity: str  # "ERROR" | "WARN"
    code: str
    message: str
    file: str | None = None
    line: int | None = None
    hint: str | None = None


@dataclass(frozen=True)
class LintResult:
    issues: list[Issue]

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "ERROR" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == "WARN" for i in self.issues)


def is_plausible_owner(token: str) -> bool:
    return bool(_TEAM_RE.match(token) or _USER_RE.match(token) or _EMAIL_RE.match(token))


def lint_codeowners(
    text: str,
    *,
    source: str = "CODEOWNERS",
    strict: bool = False,
    git: Git | None = None,
) -> LintResult:
    """Lint CODEOWNERS text.

    Unlike the parser this keeps going after a bad line so every problem is
    reported in one pass. Passing ``git`` enables the (slow) check that each
    pattern matches at least one tracked file.
    """
    warn = "ERROR" if strict else "WARN"
    issues: list[Issue] = []
    seen: dict[str, tuple[int, list[str]]] = {}
    compiled: list[tuple[int, CompiledPattern]] = []

    for idx, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()

        if len(parts) < 2:
            issues.append(
                Issue(
                    severity=warn,
                    code="NO_OWNERS",
                    message=f"Pattern '{parts[0]}' has no owners; the line is ignored.",
                    file=source,
                    line=idx,
                    hint="Add an owner, or delete the line if it is unused.",
                )
            )
            continue

        pat = parts[0]
        try:
            compiled.append((idx, compile_pattern(pat)))
        except InvalidPatternError as e:
            issues.append(
                Issue(severity="ERROR", code="INVALID_PATTERN", message=str(e), file=source, line=idx)
            )
            continue

        owners = split_owners(parts[1:])
        for owner in owners:
            if not is_plausible_owner(owner):
                issues.append(
                    Issue(
                        severity=warn,
                        code="SUSPICIOUS_OWNER",
                        message=f"Owner '{owner}' is not an @user, @org/team or email address.",
                        file=source,
                        line=idx,
                    )
                )

        prev = seen.get(pat)
        if prev is not None and prev[1] != owners:
            issues.append(
                Issue(
                    severity=warn,
                    code="DUPLICATE_PATTERN",
                    message=(
                        f"Pattern '{pat}' is defined multiple times (last-match wins). "
                        f"Previous: {' '.join(prev[1])} (line {prev[0]}), this: {' '.join(owners)} (line {idx})."
                    ),
                    file=source,
                    line=idx,
                    hint="Remove the earlier line; it never applies.",
                )
            )
        seen[pat] = (idx, owners)

    if git is not None:
        try:
            tracked = git.ls_files()
        except GitError as e:
            issues.append(Issue(severity="ERROR", code="GIT_ERROR", message=str(e)))
        else:
            issues.extend(_unmatched(compiled, tracked, source=source, severity=warn))

    return LintResult(issues=issues)


def _unmatched(
    compiled: list[tuple[int, CompiledPattern]],
    tracked: Iterable[str],
    *,
    source: str,
    severity: str,
) -> list[Issue]:
    tracked = list(tracked)
    out: list[Issue] = []
    for line, cp in compiled:
        if not any(cp.matches(f) for f in tracked):
            out.append(
                Issue(
                    severity=severity,
                    code="PATTERN_MATCHES_NOTHING",
                    message=f"Pattern '{cp.raw}' matches no git-tracked files.",
                    file=source,
                    line=line,
                    hint="Remove it or fix the glob (or ignore if files are generated later).",
                )
            )
    return out
