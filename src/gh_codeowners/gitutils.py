from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Sequence

from .errors import GhError, GitError, UsageError
from .paths import normalize_paths

log = logging.getLogger(__name__)


def _run(tool: str, cwd: Path, args: Sequence[str], error: type[Exception]) -> str:
    log.debug("running %s %s (cwd=%s)", tool, " ".join(args), cwd)
    try:
        cp = subprocess.run(
            [tool, *args],
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=True,
        )
        return cp.stdout
    except FileNotFoundError as e:
        raise error(f"{tool} not found on PATH") from e
    except subprocess.CalledProcessError as e:
        msg = e.stderr.strip() or e.stdout.strip() or str(e)
        raise error(f"{tool} {' '.join(args)} failed: {msg}") from e


def _run_git(repo_root: Path, args: Sequence[str]) -> str:
    return _run("git", repo_root, args, GitError)


def find_repo_root(cwd: Path | None = None) -> Path:
    cwd = cwd or Path.cwd()
    out = _run_git(cwd, ["rev-parse", "--show-toplevel"]).strip()
    if not out:
        raise GitError("Not a git repository (or any of the parent directories)")
    return Path(out)


class Git:
    """The handful of git porcelain calls the commands need."""

    def __init__(self, repo_root: Path):
        self.repo_root = repo_root

    def run(self, *args: str) -> str:
        return _run_git(self.repo_root, args)

    def changed_files(self) -> list[str]:
        # Unstaged modifications of tracked files in the working tree.
        out = self.run("--no-pager", "diff", "--name-only")
        return normalize_paths(out.splitlines())

    def ls_files(self) -> list[str]:
        out = self.run("ls-files", "-z")
        return [p for p in out.split("\0") if p]

    def remotes(self) -> list[str]:
        return [line.strip() for line in self.run("remote").splitlines() if line.strip()]

    def add(self, *paths: str) -> str:
        return self.run("add", "--", *paths)

    def checkout_new_branch(self, name: str) -> str:
        return self.run("checkout", "-b", name)

    def checkout_previous(self) -> str:
        return self.run("checkout", "-")

    def commit(self, message: str) -> str:
        return self.run("commit", "--message", message)

    def push(self, remote: str, branch: str) -> str:
        return self.run("push", "--set-upstream", remote, branch)


def resolve_remote(git: Git, preferred: str | None = None) -> str:
    remotes = git.remotes()
    if preferred:
        if preferred not in remotes:
            raise UsageError(f"remote '{preferred}' does not exist (have: {', '.join(remotes) or 'none'})")
        return preferred
    if len(remotes) == 1:
        return remotes[0]
    if "origin" in remotes:
        return "origin"
    if not remotes:
        raise UsageError("repository has no git remotes to push to")
    raise UsageError(f"could not pick a remote from {', '.join(remotes)} (set 'remote' in the config file)")


class Gh:
    """Thin wrapper over the GitHub CLI."""

    def __init__(self, cwd: Path):
        self.cwd = cwd

    def run(self, *args: str) -> str:
        return _run("gh", self.cwd, args, GhError)

    def json(self, *args: str) -> Any:
        out = self.run(*args)
        try:
            return json.loads(out) if out.strip() else None
        except json.JSONDecodeError as e:
            raise GhError(f"gh {' '.join(args)} returned invalid JSON: {e}") from e

    def api(self, path: str) -> Any:
        return self.json("api", path)

    def current_repo_owner(self) -> str:
        payload = self.json("repo", "view", "--json", "owner")
        owner = ((payload or {}).get("owner") or {}).get("login")
        if not isinstance(owner, str) or not owner:
            raise GhError("could not determine the current repository owner")
        return owner

    def pr_list(self, fields: Sequence[str], limit: int) -> list[dict[str, Any]]:
        payload = self.json("pr", "list", "--json", ",".join(fields), "--limit", str(limit))
        if not isinstance(payload, list):
            raise GhError("gh pr list did not return a list")
        return payload

    def pr_create(self, *, title: str, body_file: Path, draft: bool, dry_run: bool) -> str:
        return self.run(
            "pr",
            "create",
            "--body-file",
            str(body_file),
            "--title",
            title,
            f"--draft={str(draft).lower()}",
            f"--dry-run={str(dry_run).lower()}",
        )
