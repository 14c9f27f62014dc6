from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigError

CONFIG_FILE = ".gh-codeowners.yml"

DEFAULT_CODEOWNERS_LOCATIONS: tuple[str, ...] = (".github/CODEOWNERS", "CODEOWNERS", "docs/CODEOWNERS")


@dataclass(frozen=True)
class Config:
    codeowners_locations: tuple[str, ...] = DEFAULT_CODEOWNERS_LOCATIONS
    remote: str | None = None
    draft: bool = False
    branch_template: str | None = None
    commit_template: str | None = None
    pr_template: str | None = None


def _opt_str(data: Mapping[str, Any], key: str, *, source: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{source}: '{key}' must be a non-empty string")
    return value


def parse_config_obj(data: Any, *, source: str) -> Config:
    if data is None:
        return Config()
    if not isinstance(data, Mapping):
        raise ConfigError(f"{source}: expected a mapping")

    known = {f.name for f in fields(Config)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ConfigError(f"{source}: unknown keys: {', '.join(unknown)}")

    locations = data.get("codeowners_locations")
    if locations is None:
        locations = DEFAULT_CODEOWNERS_LOCATIONS
    elif not isinstance(locations, list) or not locations or not all(isinstance(x, str) and x for x in locations):
        raise ConfigError(f"{source}: 'codeowners_locations' must be a non-empty list of paths")

    draft = data.get("draft", False)
    if not isinstance(draft, bool):
        raise ConfigError(f"{source}: 'draft' must be true or false")

    return Config(
        codeowners_locations=tuple(locations),
        remote=_opt_str(data, "remote", source=source),
        draft=draft,
        branch_template=_opt_str(data, "branch_template", source=source),
        commit_template=_opt_str(data, "commit_template", source=source),
        pr_template=_opt_str(data, "pr_template", source=source),
    )


def load_config(path: Path) -> Config:
    if not path.exists():
        return Config()
    try:
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e
    return parse_config_obj(obj, source=str(path))
