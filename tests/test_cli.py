import json
from pathlib import Path

import pytest

from gh_codeowners import cli


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    (tmp_path / ".github").mkdir()
    (tmp_path / ".github" / "CODEOWNERS").write_text(
        "# owners\ntest-dir @team-1\nother-dir @team-2\n", encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def git(monkeypatch, make_git):
    fake = make_git(["test-dir/test-file.txt"])
    monkeypatch.setattr(cli, "Git", lambda repo_root: fake)
    return fake


def _run(argv) -> int:
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


def test_report(repo, git, capsys):
    assert _run(["--repo-root", str(repo), "report"]) == 0
    assert capsys.readouterr().out == "@team-1: 1\n"


def test_report_json(repo, git, capsys):
    git.changed = ["test-dir/a", "elsewhere/b"]
    assert _run(["--repo-root", str(repo), "report", "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["owners"] == {"@team-1": {"count": 1, "files": ["test-dir/a"]}}
    assert payload["unowned_files"] == ["elsewhere/b"]


def test_stage(repo, git, capsys):
    assert _run(["--repo-root", str(repo), "stage", "@team-1"]) == 0
    assert capsys.readouterr().out == "Staged: test-dir/test-file.txt\n"
    assert git.calls == [("add", "test-dir/test-file.txt")]


def test_stage_nothing_owned(repo, git, capsys):
    assert _run(["--repo-root", str(repo), "stage", "@team-2"]) == 2
    assert "did not find any files owned by '@team-2'" in capsys.readouterr().err
    assert git.calls == []


def test_stage_requires_team(repo, git):
    assert _run(["--repo-root", str(repo), "stage"]) == 2


def test_who_owns_explain(repo, capsys):
    assert _run(["--repo-root", str(repo), "who-owns", "test-dir/x.txt", "--explain"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("test-dir/x.txt: @team-1\n")
    assert "<== chosen" in out


def test_who_owns_json_unowned(repo, capsys):
    assert _run(["--repo-root", str(repo), "who", "nope.txt", "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["owners"] == []
    assert payload["chosen_rule"] is None


def test_missing_codeowners(tmp_path, git, capsys):
    assert _run(["--repo-root", str(tmp_path), "report"]) == 2
    assert "could not locate a CODEOWNERS file" in capsys.readouterr().err


def test_bad_pattern_is_reported_with_the_pattern(repo, git, capsys):
    (repo / ".github" / "CODEOWNERS").write_text("src/***/x @team-1\n", encoding="utf-8")
    assert _run(["--repo-root", str(repo), "report"]) == 2
    err = capsys.readouterr().err
    assert err.startswith("parse error:")
    assert "src/***/x" in err


def test_config_locations(repo, git, capsys):
    (repo / "OWNERS").write_text("* @everyone\n", encoding="utf-8")
    (repo / ".gh-codeowners.yml").write_text("codeowners_locations: [OWNERS]\n", encoding="utf-8")
    assert _run(["--repo-root", str(repo), "report"]) == 0
    assert capsys.readouterr().out == "@everyone: 1\n"


def test_invalid_config(repo, git, capsys):
    (repo / ".gh-codeowners.yml").write_text("bogus: 1\n", encoding="utf-8")
    assert _run(["--repo-root", str(repo), "report"]) == 2
    assert capsys.readouterr().err.startswith("config error:")


def test_lint_exit_codes(repo, capsys):
    assert _run(["--repo-root", str(repo), "lint"]) == 0
    (repo / ".github" / "CODEOWNERS").write_text("/docs/\n", encoding="utf-8")
    assert _run(["--repo-root", str(repo), "lint"]) == 0
    assert _run(["--repo-root", str(repo), "lint", "--strict"]) == 2
    assert "NO_OWNERS" in capsys.readouterr().out


def test_audit_keeps_the_given_org(repo, monkeypatch, fake_gh, capsys):
    (repo / ".github" / "CODEOWNERS").write_text("dir/ @other/team-1\n", encoding="utf-8")
    fake_gh.open_prs = [{"number": 1, "author": {"login": "bob"}, "files": [{"path": "dir/a"}]}]
    monkeypatch.setattr(cli, "Gh", lambda repo_root: fake_gh)
    assert _run(["--repo-root", str(repo), "audit", "@other/team-1"]) == 0
    assert capsys.readouterr().out == "dir/a: 1\n"
    assert fake_gh.api_paths == ["/orgs/other/teams/team-1/members"]
