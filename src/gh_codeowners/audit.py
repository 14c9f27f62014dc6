from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .errors import GhError
from .gitutils import Gh
from .ownership import OwnerQuery

log = logging.getLogger(__name__)

PR_FIELDS = ("author", "number", "reviewRequests", "files")


@dataclass(frozen=True)
class ReviewRequest:
    kind: str  # "Team" | "User"
    name: str


@dataclass(frozen=True)
class PullRequest:
    number: int
    author: str
    files: list[str] = field(default_factory=list)
    review_requests: list[ReviewRequest] = field(default_factory=list)

    @staticmethod
    def from_obj(obj: Any) -> "PullRequest":
        if not isinstance(obj, dict):
            raise GhError(f"unexpected pull request payload: {obj!r}")
        number = obj.get("number")
        if not isinstance(number, int):
            raise GhError(f"pull request without a number: {obj!r}")

        requests: list[ReviewRequest] = []
        for rr in obj.get("reviewRequests") or []:
            kind = rr.get("__typename")
            if kind == "Team":
                requests.append(ReviewRequest(kind=kind, name=rr.get("slug") or rr.get("name") or ""))
            elif kind == "User":
                requests.append(ReviewRequest(kind=kind, name=rr.get("login") or ""))
            else:
                raise GhError(f"unknown review request type: {kind}")

        return PullRequest(
            number=number,
            author=(obj.get("author") or {}).get("login") or "",
            files=[f.get("path") for f in obj.get("files") or [] if f.get("path")],
            review_requests=requests,
        )


def team_members(gh: Gh, org: str, team: str) -> list[str]:
    payload = gh.api(f"/orgs/{org}/teams/{team}/members")
    if not isinstance(payload, list):
        raise GhError(f"could not list members of {org}/{team}")
    return [m["login"] for m in payload if isinstance(m, dict) and m.get("login")]


def audit_files(query: OwnerQuery, prs: list[PullRequest], *, owner: str, members: list[str]) -> dict[str, int]:
    """How often each file owned by ``owner`` shows up in PRs from outsiders."""
    counts: dict[str, int] = {}
    for pr in prs:
        if pr.author in members:
            continue
        for path in pr.files:
            log.debug("checking ownership of %s in PR #%d", path, pr.number)
            if query.is_owned_by(path, owner):
                counts[path] = counts.get(path, 0) + 1
    return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))


def run_audit(
    query: OwnerQuery, *, gh: Gh, team: str, org: str | None = None, limit: int = 50
) -> dict[str, int]:
    org = org or gh.current_repo_owner()
    members = team_members(gh, org, team)
    log.debug("team %s/%s members: %s", org, team, ", ".join(members))
    prs = [PullRequest.from_obj(o) for o in gh.pr_list(PR_FIELDS, limit)]
    return audit_files(query, prs, owner=f"@{org}/{team}", members=members)
