"""Tests for the stackcomment CLI."""

from typing import Tuple

import pytest
from click.testing import CliRunner

import stackcomment
from stackcomment.cmd.stackcomment import main
from stackcomment.comment import COMMENT_HEADER
from stackcomment.config import Config
from stackcomment.tests.fakes import FakeGit

METADATA = {
    "f1": {"parentBranchName": "main", "prInfo": {"number": 1, "base": "main"}},
    "f2": {"parentBranchName": "f1", "prInfo": {"number": 2, "base": "f1"}},
}


@pytest.fixture
def cli_git(monkeypatch: pytest.MonkeyPatch, config: Config) -> FakeGit:
    git_cmd = FakeGit(METADATA)

    def fake_setup_git(directory=None) -> Tuple[Config, FakeGit]:
        return config, git_cmd

    monkeypatch.setattr(main, "setup_git", fake_setup_git)
    monkeypatch.setattr(stackcomment, "setup_logging", lambda verbose=0: None)
    return git_cmd


def test_show(cli_git: FakeGit) -> None:
    result = CliRunner().invoke(main.cli, ["show"])
    assert result.exit_code == 0
    assert result.output == COMMENT_HEADER + "* main:\n  * **PR #1**\n    * **PR #2**\n"


def test_show_alias_with_marker(cli_git: FakeGit) -> None:
    result = CliRunner().invoke(main.cli, ["sh", "--pr", "1"])
    assert result.exit_code == 0
    assert result.output == COMMENT_HEADER + "* main:\n  * **PR #1** 👈\n    * **PR #2**\n"


def test_show_selected_branch_completes_route(cli_git: FakeGit) -> None:
    result = CliRunner().invoke(main.cli, ["show", "-b", "f2"])
    assert result.exit_code == 0
    assert result.output == COMMENT_HEADER + "* main:\n  * **PR #1**\n    * **PR #2**\n"


def test_show_unknown_pr_fails(cli_git: FakeGit) -> None:
    result = CliRunner().invoke(main.cli, ["show", "-b", "f2", "--pr", "1"])
    assert result.exit_code == 1


def test_submit_pretend_posts_nothing(cli_git: FakeGit, config: Config, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "find_github_token", lambda host="github.com": None)
    posted = []
    monkeypatch.setattr(main.GitHubClient, "upsert_stack_comment",
                        lambda self, number, body: posted.append((number, self.config.tool.pretend)))
    result = CliRunner().invoke(main.cli, ["submit", "--pretend"])
    assert result.exit_code == 0
    assert posted == [(1, True), (2, True)]


def test_submit_requires_token(cli_git: FakeGit, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "find_github_token", lambda host="github.com": None)
    result = CliRunner().invoke(main.cli, ["submit"])
    assert result.exit_code == 1


def test_show_without_repo_owner_fails_cleanly(monkeypatch: pytest.MonkeyPatch) -> None:
    config = Config({'repo': {'github_branch': 'main'}})
    git_cmd = FakeGit({
        "b1": {"parentBranchName": "main"},
        "f2": {"parentBranchName": "b1", "prInfo": {"number": 2, "base": "b1"}},
    })
    monkeypatch.setattr(main, "setup_git", lambda directory=None: (config, git_cmd))
    monkeypatch.setattr(stackcomment, "setup_logging", lambda verbose=0: None)

    for command in (["show"], ["submit", "--pretend"]):
        result = CliRunner().invoke(main.cli, command)
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)


def test_show_marker_for_pr_without_route_fails(monkeypatch: pytest.MonkeyPatch, config: Config) -> None:
    git_cmd = FakeGit({"f4": {"prInfo": {"number": 4, "base": "orphan"}}})
    monkeypatch.setattr(main, "setup_git", lambda directory=None: (config, git_cmd))
    monkeypatch.setattr(stackcomment, "setup_logging", lambda verbose=0: None)

    result = CliRunner().invoke(main.cli, ["show", "--pr", "4"])
    assert result.exit_code == 1
    assert "👈" not in result.output
