from __future__ import annotations

from .lint import LintResult
from .report import OwnerReport


def _plural(n: int, word: str = "file") -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


def _file_list(files: list[str], limit: int) -> list[str]:
    lines = [f"  - `{f}`" for f in files[:limit]]
    if len(files) > limit:
        lines.append(f"  - _…and {len(files) - limit} more_")
    return lines


def render_report_markdown(
    report: OwnerReport,
    *,
    title: str = "Code owners",
    include_files: bool = False,
    max_files_per_owner: int = 50,
) -> str:
    lines: list[str] = [f"## {title}", ""]

    if not report.total_files():
        lines.append("_No changed files detected._")
        return "\n".join(lines)

    owned = sorted(report.owners_to_files.items(), key=lambda kv: (-len(kv[1]), kv[0]))

    lines.append(f"### Owners ({len(owned)})")
    lines.append("")
    for owner, files in owned:
        lines.append(f"- **{owner}** ({_plural(len(files))})")
        if include_files:
            lines.extend(_file_list(files, max_files_per_owner))
    lines.append("")

    if report.multi_owned:
        lines.append(f"### Shared ownership ({_plural(len(report.multi_owned))})")
        lines.append("")
        for path, owners in report.multi_owned.items():
            lines.append(f"- `{path}`: {', '.join(owners)}")
        lines.append("")

    if report.unowned_files:
        lines.append(f"### Unowned files ({len(report.unowned_files)})")
        lines.append("")
        for f in report.unowned_files[:max_files_per_owner]:
            lines.append(f"- `{f}`")
        if len(report.unowned_files) > max_files_per_owner:
            lines.append(f"- _…and {len(report.unowned_files) - max_files_per_owner} more_")
        lines.append("")

    return "\n".join(lines)


def render_lint_markdown(result: LintResult, *, title: str = "Lint") -> str:
    if not result.issues:
        return f"### {title}\n\n✅ No lint issues found.\n"

    lines: list[str] = [f"### {title}", ""]
    for iss in result.issues:
        loc = f"{iss.file}:{iss.line}: " if iss.file and iss.line else ""
        hint = f" _(hint: {iss.hint})_" if iss.hint else ""
        icon = "❌" if iss.severity == "ERROR" else "⚠️"
        lines.append(f"- {icon} **{iss.code}**: {loc}{iss.message}{hint}")
    lines.append("")
    return "\n".join(lines)
