from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .codeowners_file import load_codeowners
from .config import DEFAULT_CODEOWNERS_LOCATIONS
from .errors import UsageError
from .ownership import OwnerQuery, OwnershipIndex

log = logging.getLogger(__name__)


def find_codeowners(repo_root: Path, locations: Sequence[str] = DEFAULT_CODEOWNERS_LOCATIONS) -> Path | None:
    for loc in locations:
        p = repo_root / loc
        if p.is_file():
            return p
    return None


def load_index(
    repo_root: Path,
    locations: Sequence[str] = DEFAULT_CODEOWNERS_LOCATIONS,
    explicit: Path | None = None,
) -> OwnershipIndex:
    path = explicit if explicit is not None else find_codeowners(repo_root, locations)
    if path is None:
        raise UsageError(f"could not locate a CODEOWNERS file (looked in: {', '.join(locations)})")
    log.debug("using ownership file %s", path)
    return OwnershipIndex(load_codeowners(path))


def load_query(
    repo_root: Path,
    locations: Sequence[str] = DEFAULT_CODEOWNERS_LOCATIONS,
    explicit: Path | None = None,
) -> OwnerQuery:
    return OwnerQuery(load_index(repo_root, locations, explicit))
