from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .audit import run_audit
from .autopr import AutoPROptions, run_auto_pr
from .config import CONFIG_FILE, Config, load_config
from .discovery import find_codeowners, load_index, load_query
from .errors import ConfigError, GhError, GitError, ParseError, UsageError
from .gitutils import Gh, Git, find_repo_root
from .lint import lint_codeowners
from .markdown import render_lint_markdown, render_report_markdown
from .ownership import OwnerQuery, OwnershipIndex
from .paths import normalize_repo_path
from .prompter import RichPrompter
from .report import compute_report, render_report_text
from .teams import Team
from .version import __version__


def _repo_root(args_repo_root: str | None) -> Path:
    if args_repo_root:
        return Path(args_repo_root).resolve()
    try:
        return find_repo_root()
    except GitError:
        return Path.cwd()


def _config(args: argparse.Namespace, repo_root: Path) -> Config:
    path = Path(args.config) if args.config else repo_root / CONFIG_FILE
    return load_config(path)


def _index(args: argparse.Namespace, repo_root: Path, config: Config) -> OwnershipIndex:
    explicit = Path(args.codeowners).resolve() if args.codeowners else None
    return load_index(repo_root, config.codeowners_locations, explicit)


def _setup(args: argparse.Namespace) -> tuple[Path, Config, OwnerQuery]:
    repo_root = _repo_root(args.repo_root)
    config = _config(args, repo_root)
    explicit = Path(args.codeowners).resolve() if args.codeowners else None
    return repo_root, config, load_query(repo_root, config.codeowners_locations, explicit)


def cmd_report(args: argparse.Namespace) -> int:
    repo_root, _, query = _setup(args)
    changed = Git(repo_root).changed_files()
    report = compute_report(query, changed)

    if args.format == "json":
        payload = {
            "owners": {k: {"count": len(v), "files": v} for k, v in report.owners_to_files.items()},
            "multi_owned": report.multi_owned,
            "unowned_files": report.unowned_files,
            "total_files": report.total_files(),
            "version": __version__,
        }
        print(json.dumps(payload, indent=2))
    elif args.format == "markdown":
        print(render_report_markdown(report, include_files=args.show_files, max_files_per_owner=args.max_files))
    else:
        text = render_report_text(report)
        if text:
            print(text)
    return 0


def cmd_stage(args: argparse.Namespace) -> int:
    repo_root, _, query = _setup(args)
    git = Git(repo_root)
    team = args.team

    staged = 0
    for path in git.changed_files():
        if not query.is_owned_by(path, team):
            continue
        try:
            git.add(path)
        except GitError as e:
            raise GitError(f"failed to stage '{path}': {e}") from e
        print(f"Staged: {path}")
        staged += 1

    if not staged:
        raise UsageError(
            f"did not find any files owned by '{team}'; run `gh codeowners report` to see who owns your edited files"
        )
    return 0


def cmd_auto_pr(args: argparse.Namespace) -> int:
    repo_root, config, query = _setup(args)
    template = args.template or config.pr_template
    opts = AutoPROptions(
        branch_template=args.branch or config.branch_template,
        commit_template=args.commit or config.commit_template,
        template=(repo_root / template) if template else None,
        unowned_files=args.unowned_files,
        draft=args.draft or config.draft,
        dry_run=args.dry_run,
        remote=config.remote,
    )
    run_auto_pr(query, git=Git(repo_root), gh=Gh(repo_root), prompter=RichPrompter(), opts=opts)
    return 0


def cmd_audit(args: argparse.Namespace) -> int:
    repo_root, _, query = _setup(args)
    gh = Gh(repo_root)
    org = None
    team = args.team
    if team.startswith("@"):
        parsed = Team.parse(team)
        org, team = parsed.org, parsed.name

    counts = run_audit(query, gh=gh, team=team, org=org, limit=args.limit)
    if args.format == "json":
        print(json.dumps({"team": team, "files": counts, "version": __version__}, indent=2))
        return 0
    for path, n in counts.items():
        print(f"{path}: {n}")
    return 0


def cmd_who_owns(args: argparse.Namespace) -> int:
    repo_root = _repo_root(args.repo_root)
    idx = _index(args, repo_root, _config(args, repo_root))
    path = normalize_repo_path(args.path, repo_root=repo_root)
    m = idx.match(path)

    if args.format == "json":
        payload = {
            "path": path,
            "owners": m.owners,
            "chosen_rule": {"pattern": m.chosen.pattern, "owners": list(m.chosen.owners), "line": m.chosen.line}
            if m.chosen
            else None,
            "matches": [{"pattern": r.pattern, "owners": list(r.owners), "line": r.line} for r in m.matches],
            "version": __version__,
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"{path}: {' '.join(m.owners) if m.owners else '(unowned)'}")
    if args.explain:
        print("")
        if not m.matches:
            print("No matching rules.")
        else:
            print("Matched rules (last-match wins):")
            for r in m.matches:
                chosen = "  <== chosen" if r is m.chosen else ""
                print(f"- {r.pattern} -> {' '.join(r.owners) or '(none)'} ({r.source}:{r.line}){chosen}")
    return 0


def cmd_lint(args: argparse.Namespace) -> int:
    repo_root = _repo_root(args.repo_root)
    config = _config(args, repo_root)
    path = Path(args.codeowners).resolve() if args.codeowners else find_codeowners(repo_root, config.codeowners_locations)
    if path is None or not path.is_file():
        raise UsageError("CODEOWNERS file not found (use --codeowners PATH)")

    res = lint_codeowners(
        path.read_text(encoding="utf-8"),
        source=str(path),
        strict=args.strict,
        git=Git(repo_root) if args.check_matches else None,
    )

    if args.format == "json":
        payload = {
            "issues": [
                {
                    "severity": i.severity,
                    "code": i.code,
                    "message": i.message,
                    "file": i.file,
                    "line": i.line,
                    "hint": i.hint,
                }
                for i in res.issues
            ],
            "version": __version__,
        }
        print(json.dumps(payload, indent=2))
    else:
        print(render_lint_markdown(res, title="Lint"))

    return 2 if res.has_errors else 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="gh-codeowners",
        description="Do work efficiently with the context of a CODEOWNERS file.",
    )
    p.add_argument("--repo-root", default=None, help="Repository root (default: auto-detect with git)")
    p.add_argument("--codeowners", default=None, help="Path to CODEOWNERS (default: search common locations)")
    p.add_argument("--config", default=None, help=f"Path to the config file (default: {CONFIG_FILE} in the repo root)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    p.add_argument("--version", action="version", version=f"gh-codeowners {__version__}")

    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("report", help="Report the owners of all edited files in the working tree")
    r.add_argument("--format", choices=["text", "json", "markdown"], default="text")
    r.add_argument("--show-files", action="store_true", help="List files per owner in markdown output")
    r.add_argument("--max-files", type=int, default=50, help="Max files to show per owner in markdown output")
    r.set_defaults(func=cmd_report)

    s = sub.add_parser("stage", help="Stage the edited files owned by TEAM")
    s.add_argument("team", help="Owner token exactly as written in CODEOWNERS, e.g. @my-org/my-team")
    s.set_defaults(func=cmd_stage)

    a = sub.add_parser(
        "auto-pr",
        aliases=["pr"],
        help="Make one PR per owning team from a single changeset",
        description=(
            "Branch, commit and PR body templates use {placeholders}: {team} is the owner token, "
            "{name} the team name with shared prefixes and suffixes removed, {number} an incrementing "
            "PR counter, {files} the newline separated file list, {count} the number of files and "
            "{promote} a link to this tool. Any other {Placeholder} is asked for once per team. "
            "Branch names that are not unique get the PR number appended."
        ),
    )
    a.add_argument("-b", "--branch", default=None, help="Template for each branch that is created")
    a.add_argument("-c", "--commit", default=None, help="Template for each commit message and PR title")
    a.add_argument("-T", "--template", default=None, metavar="FILE", help="PR body template file")
    a.add_argument(
        "-u",
        "--unowned-files",
        default=None,
        help="Owner whose PR gets the unowned files, or 'separate' to give them their own PR",
    )
    a.add_argument("-d", "--draft", action="store_true", help="Mark the pull requests as drafts")
    a.add_argument(
        "--dry-run",
        action="store_true",
        help="Print details instead of creating the PR. Branches are still pushed.",
    )
    a.set_defaults(func=cmd_auto_pr)

    au = sub.add_parser("audit", help="Count TEAM's files touched by open PRs from outside the team")
    au.add_argument("team", help="Team slug, or @org/team")
    au.add_argument("--limit", type=int, default=50, help="How many open PRs to inspect")
    au.add_argument("--format", choices=["text", "json"], default="text")
    au.set_defaults(func=cmd_audit)

    w = sub.add_parser("who-owns", aliases=["who", "owner"], help="Find the owners of a path")
    w.add_argument("path", help="Path to a file (relative or absolute)")
    w.add_argument("--format", choices=["text", "json"], default="text")
    w.add_argument("--explain", action="store_true", help="Show the matching rules and precedence")
    w.set_defaults(func=cmd_who_owns)

    lt = sub.add_parser("lint", help="Lint the CODEOWNERS file")
    lt.add_argument("--format", choices=["text", "json"], default="text")
    lt.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    lt.add_argument(
        "--check-matches",
        action="store_true",
        help="Check each pattern matches at least one git-tracked file (can be slow)",
    )
    lt.set_defaults(func=cmd_lint)

    return p


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> None:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        _configure_logging(args.verbose)
        rc = args.func(args)
    except UsageError as e:
        print(f"error: {e}", file=sys.stderr)
        rc = 2
    except ParseError as e:
        print(f"parse error: {e}", file=sys.stderr)
        rc = 2
    except ConfigError as e:
        print(f"config error: {e}", file=sys.stderr)
        rc = 2
    except GitError as e:
        print(f"git error: {e}", file=sys.stderr)
        rc = 2
    except GhError as e:
        print(f"gh error: {e}", file=sys.stderr)
        rc = 2
    except KeyboardInterrupt:
        rc = 130

    raise SystemExit(rc)
