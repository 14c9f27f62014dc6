from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .errors import UsageError
from .gitutils import Gh, Git, resolve_remote
from .ownership import OwnerQuery
from .pr_templates import find_templates, strip_front_matter, template_name
from .prompter import Prompter
from .teams import build_short_names
from .templating import TemplateData, check_template, render

log = logging.getLogger(__name__)

SEPARATE = "separate"
UNOWNED_GROUP = "unowned"
CHOOSE_EACH = "Choose for each"
BLANK_TEMPLATE = "Start with a blank pull request"
DEFAULT_COMMIT_TEMPLATE = "Files for {team}"


@dataclass(frozen=True)
class AutoPROptions:
    branch_template: str | None = None
    commit_template: str | None = None
    template: Path | None = None
    unowned_files: str | None = None
    draft: bool = False
    dry_run: bool = False
    remote: str | None = None


def group_files(query: OwnerQuery, files: Iterable[str]) -> tuple[dict[str, list[str]], list[str]]:
    """Group files so that as few PRs as possible are needed.

    A file goes to the first of its owners that already has a group, or
    starts a new group for its first listed owner.
    """
    groups: dict[str, list[str]] = {}
    unowned: list[str] = []
    for path in files:
        owners = query.find_owners(path)
        if not owners:
            unowned.append(path)
            continue
        target = next((o for o in owners if o in groups), owners[0])
        groups.setdefault(target, []).append(path)
    return groups, unowned


def place_unowned(
    groups: dict[str, list[str]],
    unowned: list[str],
    *,
    choice: str | None,
    prompter: Prompter,
) -> None:
    if not unowned:
        return

    targets = [*groups.keys(), "Separate"]
    if choice is None:
        options = [*targets, CHOOSE_EACH]
        idx = prompter.select(f"Choose where to put {len(unowned)} unowned files", options)
        choice = options[idx]

    if choice == CHOOSE_EACH:
        for path in unowned:
            idx = prompter.select(f"Choose where to put '{path}'", targets)
            _add_unowned(groups, [path], targets[idx])
        return

    _add_unowned(groups, unowned, choice)


def _add_unowned(groups: dict[str, list[str]], files: list[str], choice: str) -> None:
    if choice.lower() == SEPARATE:
        groups.setdefault(UNOWNED_GROUP, []).extend(files)
    elif choice in groups:
        groups[choice].extend(files)
    else:
        raise UsageError(
            f"--unowned-files must be '{SEPARATE}' or one of: {', '.join(groups) or '(no owners)'}"
        )


def _required(value: str | None, *, prompter: Prompter, prompt: str, default: str, what: str) -> str:
    if value is None:
        value = prompter.input(prompt, default)
        if not value:
            raise UsageError(f"{what} is required")
    check_template(value)
    return value


def _body_template(opts: AutoPROptions, *, repo_root: Path, prompter: Prompter) -> str:
    initial = ""
    if opts.template is not None:
        try:
            initial = opts.template.read_text(encoding="utf-8")
        except OSError as e:
            raise UsageError(f"could not open the given template file '{opts.template}': {e}") from e
    else:
        templates = find_templates(repo_root)
        if templates:
            names = [template_name(t) for t in templates]
            idx = prompter.select("Choose a template", [*names, BLANK_TEMPLATE])
            if idx < len(templates):
                initial = strip_front_matter(templates[idx].read_text(encoding="utf-8"))

    body = prompter.edit(initial)
    check_template(body)
    return body


def _create_pr(gh: Gh, *, title: str, body: str, draft: bool, dry_run: bool) -> str:
    fd, name = tempfile.mkstemp(prefix="team_pr_body", suffix=".md")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(body)
        return gh.pr_create(title=title, body_file=Path(name), draft=draft, dry_run=dry_run)
    finally:
        os.unlink(name)


def run_auto_pr(
    query: OwnerQuery,
    *,
    git: Git,
    gh: Gh,
    prompter: Prompter,
    opts: AutoPROptions,
) -> list[str]:
    """Split the working tree changes into one branch and PR per owner.

    Returns the branch names that were pushed, in creation order.
    """
    groups, unowned = group_files(query, git.changed_files())
    place_unowned(groups, unowned, choice=opts.unowned_files, prompter=prompter)

    if not groups:
        raise UsageError("there are no files to make PRs for")
    if len(groups) == 1:
        raise UsageError("only one PR would be made, it's recommended to just use `gh pr create`")

    branch_tpl = _required(
        opts.branch_template,
        prompter=prompter,
        prompt="What branch template do you want?",
        default="",
        what="branch template",
    )
    commit_tpl = _required(
        opts.commit_template,
        prompter=prompter,
        prompt="What commit/PR title template do you want?",
        default=DEFAULT_COMMIT_TEMPLATE,
        what="commit template",
    )
    body_tpl = _body_template(opts, repo_root=git.repo_root, prompter=prompter)
    remote = resolve_remote(git, opts.remote)

    short_names = build_short_names(list(groups))
    branches: list[str] = []

    for number, (team, files) in enumerate(groups.items(), start=1):
        data = TemplateData(team=team, name=short_names[team], number=number, files=files, prompter=prompter)
        print(f"Creating PR for team: {team}")

        branch = render(branch_tpl, data)
        if branch in branches:
            print(f"Branch '{branch}' is not unique, adding incrementing number to the branch name")
            branch = f"{branch}-{number}"
        branches.append(branch)

        git.checkout_new_branch(branch)
        try:
            git.add(*files)

            title = render(commit_tpl, data)
            git.commit(title)
            git.push(remote, branch)

            out = _create_pr(gh, title=title, body=render(body_tpl, data), draft=opts.draft, dry_run=opts.dry_run)
            if out.strip():
                print(out.strip())
        finally:
            git.checkout_previous()
        log.debug("pushed %s with %d files for %s", branch, len(files), team)
        print(f"Finished making PR for {team}")

    return branches
