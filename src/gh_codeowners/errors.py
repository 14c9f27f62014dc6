from __future__ import annotations


class CodeownersError(Exception):
    """Base exception for gh-codeowners."""


class InvalidPatternError(CodeownersError, ValueError):
    """An ownership pattern violates the glob grammar."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid pattern '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class ParseError(CodeownersError):
    """Failed to parse an ownership file."""

    def __init__(self, message: str, *, pattern: str | None = None, line: int | None = None):
        super().__init__(message)
        self.pattern = pattern
        self.line = line


class PatternParseError(ParseError, InvalidPatternError):
    """A bad pattern in an ownership file, with the line it is on."""

    def __init__(self, message: str, *, pattern: str, reason: str, line: int | None = None):
        CodeownersError.__init__(self, message)
        self.pattern = pattern
        self.reason = reason
        self.line = line


class ConfigError(CodeownersError):
    """Configuration is missing or invalid."""


class GitError(CodeownersError):
    """Git invocation failed."""


class GhError(CodeownersError):
    """GitHub CLI invocation failed."""


class UsageError(CodeownersError):
    """Invalid CLI usage (user error)."""
