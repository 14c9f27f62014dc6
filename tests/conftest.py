from __future__ import annotations

from pathlib import Path

import pytest


class FakeGit:
    def __init__(self, repo_root: Path, changed: list[str], remotes: list[str]):
        self.repo_root = repo_root
        self.changed = changed
        self._remotes = remotes
        self.tracked: list[str] = []
        self.calls: list[tuple[str, ...]] = []

    def changed_files(self) -> list[str]:
        return list(self.changed)

    def ls_files(self) -> list[str]:
        return list(self.tracked)

    def remotes(self) -> list[str]:
        return list(self._remotes)

    def add(self, *paths: str) -> str:
        self.calls.append(("add", *paths))
        return ""

    def checkout_new_branch(self, name: str) -> str:
        self.calls.append(("checkout", "-b", name))
        return ""

    def checkout_previous(self) -> str:
        self.calls.append(("checkout", "-"))
        return ""

    def commit(self, message: str) -> str:
        self.calls.append(("commit", message))
        return ""

    def push(self, remote: str, branch: str) -> str:
        self.calls.append(("push", remote, branch))
        return ""


class FakeGh:
    def __init__(self):
        self.prs: list[dict] = []
        self.members: list[dict] = []
        self.open_prs: list[dict] = []
        self.owner = "org"
        self.api_paths: list[str] = []

    def pr_create(self, *, title: str, body_file: Path, draft: bool, dry_run: bool) -> str:
        self.prs.append(
            {"title": title, "body": body_file.read_text(encoding="utf-8"), "draft": draft, "dry_run": dry_run}
        )
        return ""

    def current_repo_owner(self) -> str:
        return self.owner

    def api(self, path: str):
        self.api_paths.append(path)
        return self.members

    def pr_list(self, fields, limit: int):
        return self.open_prs[:limit]


class FakePrompter:
    def __init__(self, inputs: dict[str, str] | None = None, selections: dict[str, int] | None = None):
        self.inputs = inputs or {}
        self.selections = selections or {}
        self.asked: list[str] = []
        self.edited: str | None = None
        self.edit_result: str | None = None

    def input(self, prompt: str, default: str = "") -> str:
        self.asked.append(prompt)
        return self.inputs.get(prompt, default)

    def select(self, prompt: str, options, default: int = 0) -> int:
        self.asked.append(prompt)
        return self.selections.get(prompt, default)

    def edit(self, text: str) -> str:
        self.edited = text
        return text if self.edit_result is None else self.edit_result


@pytest.fixture
def make_git(tmp_path):
    def make(changed=(), remotes=("origin",)) -> FakeGit:
        return FakeGit(tmp_path, list(changed), list(remotes))

    return make


@pytest.fixture
def fake_gh() -> FakeGh:
    return FakeGh()


@pytest.fixture
def make_prompter():
    return FakePrompter
