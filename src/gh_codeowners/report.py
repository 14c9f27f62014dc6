from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .ownership import OwnerQuery


@dataclass(frozen=True)
class OwnerReport:
    owners_to_files: dict[str, list[str]] = field(default_factory=dict)  # single-owner files only
    multi_owned: dict[str, list[str]] = field(default_factory=dict)  # path -> owners
    unowned_files: list[str] = field(default_factory=list)

    def owners(self) -> list[str]:
        return list(self.owners_to_files.keys())

    def count_for(self, owner: str) -> int:
        return len(self.owners_to_files.get(owner, []))

    def total_files(self) -> int:
        return (
            sum(len(v) for v in self.owners_to_files.values())
            + len(self.multi_owned)
            + len(self.unowned_files)
        )


def compute_report(query: OwnerQuery, changed_files: Iterable[str]) -> OwnerReport:
    owners_to_files: dict[str, list[str]] = {}
    multi: dict[str, list[str]] = {}
    unowned: list[str] = []

    for path in changed_files:
        owners = query.find_owners(path)
        if not owners:
            unowned.append(path)
        elif len(owners) == 1:
            owners_to_files.setdefault(owners[0], []).append(path)
        else:
            multi[path] = owners

    return OwnerReport(owners_to_files=owners_to_files, multi_owned=multi, unowned_files=unowned)


def render_report_text(report: OwnerReport) -> str:
    lines: list[str] = []
    for path, owners in report.multi_owned.items():
        lines.append(f"File '{path}' is owned by multiple teams {', '.join(owners)}")
    for owner, files in report.owners_to_files.items():
        lines.append(f"{owner}: {len(files)}")
    if report.unowned_files:
        lines.append(f"Files that are unowned: {len(report.unowned_files)}")
    return "\n".join(lines)
