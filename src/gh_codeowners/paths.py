from __future__ import annotations

import codecs
from pathlib import Path, PurePosixPath
from typing import Iterable


def unquote_git_path(path: str) -> str:
    """Undo git's C-style quoting of unusual paths (``core.quotePath``).

    ``"caf\\303\\251.txt"`` becomes ``café.txt``; unquoted paths pass through.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    raw, _ = codecs.escape_decode(path[1:-1].encode("utf-8"))
    return raw.decode("utf-8", errors="surrogateescape")


def normalize_repo_path(path: str, repo_root: Path | None = None) -> str:
    """Normalize a file path for matching.

    - Undoes git quoting and converts backslashes to slashes
    - If absolute and repo_root is provided, makes it relative to repo_root
    - Strips leading './' (repeatable) and a single leading '/'
    """
    p = unquote_git_path(path.strip()).replace("\\", "/")

    if repo_root is not None:
        pp = Path(p)
        if pp.is_absolute():
            try:
                p = pp.relative_to(repo_root).as_posix()
            except ValueError:
                # Outside the repo; match against the path as given.
                pass

    while p.startswith("./"):
        p = p[2:]
    if p.startswith("/"):
        p = p[1:]

    return str(PurePosixPath(p))


def normalize_paths(paths: Iterable[str], repo_root: Path | None = None) -> list[str]:
    return [normalize_repo_path(p, repo_root=repo_root) for p in paths if p and p.strip()]
