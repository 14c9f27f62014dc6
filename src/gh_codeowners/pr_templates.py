from __future__ import annotations

from pathlib import Path

import yaml

TEMPLATE_NAME = "PULL_REQUEST_TEMPLATE"

# Same places GitHub looks, in the same order.
_SEARCH_DIRS = (".github", ".", "docs")


def _child(directory: Path, name: str) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.name.lower() == name.lower())


def find_templates(repo_root: Path) -> list[Path]:
    """Multiple-template directories first (``PULL_REQUEST_TEMPLATE/*.md``),
    then the first single legacy template file, if any.
    """
    found: list[Path] = []
    for d in _SEARCH_DIRS:
        for sub in _child(repo_root / d, TEMPLATE_NAME):
            if sub.is_dir():
                found.extend(sorted(p for p in sub.iterdir() if p.is_file() and p.suffix.lower() == ".md"))
        if found:
            break

    for d in _SEARCH_DIRS:
        candidates = _child(repo_root / d, TEMPLATE_NAME) + _child(repo_root / d, f"{TEMPLATE_NAME}.md")
        legacy = [p for p in candidates if p.is_file()]
        if legacy:
            found.append(sorted(legacy)[0])
            break

    return found


def template_name(path: Path) -> str:
    """Front matter ``name:`` when present, else the file name."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return path.name
    if text.startswith("---"):
        end = text.find("\n---", 3)
        if end != -1:
            try:
                meta = yaml.safe_load(text[3:end])
            except yaml.YAMLError:
                meta = None
            if isinstance(meta, dict) and isinstance(meta.get("name"), str) and meta["name"].strip():
                return meta["name"].strip()
    return path.name


def strip_front_matter(text: str) -> str:
    if text.startswith("---"):
        end = text.find("\n---", 3)
        if end != -1:
            rest = text[end + 4 :]
            return rest[1:] if rest.startswith("\n") else rest
    return text
