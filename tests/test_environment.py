"""Tests for engine.environment — published GIT_* variables."""

from mcp_git_collect.engine.environment import build_environment, safe_name
from mcp_git_collect.models.repo_snapshot import RepositorySnapshot, RevisionPointer

SHA = "2222222222222222222222222222222222222222"
URL = "ssh://git@example.com:29418/repo.git"


def _snapshot():
    return RepositorySnapshot(
        scm_name="my/SCM-name",
        remote_url=URL,
        built_revision=RevisionPointer(commit_id=SHA, label="feature/x"),
        marked_revision=RevisionPointer(commit_id=SHA),
    )


def test_plain_and_qualified_variables():
    env = build_environment(_snapshot())
    assert env["GIT_COMMIT"] == SHA
    assert env["GIT_BRANCH"] == "feature/x"
    assert env["GIT_URL"] == URL
    assert env["GIT_COMMIT_my_SCM_name"] == SHA
    assert env["GIT_BRANCH_my_SCM_name"] == "feature/x"
    assert env["GIT_URL_my_SCM_name"] == URL
    assert len(env) == 6


def test_updates_given_mapping():
    env = {"PATH": "/usr/bin"}
    out = build_environment(_snapshot(), env)
    assert out is env
    assert env["PATH"] == "/usr/bin"
    assert env["GIT_COMMIT"] == SHA


def test_safe_name():
    assert safe_name("my/SCM-name") == "my_SCM_name"
    assert safe_name("repo.v2 (old)") == "repo_v2__old_"
    assert safe_name("already_safe9") == "already_safe9"
