"""Tests for engine.changelog — artifact allocation and soft failure."""

import os
import stat

import pytest
import structlog
from structlog.testing import capture_logs

from common.git_utils import GitError, GitPythonClient
from conftest import C, D, URL, FakeGitClient
from mcp_git_collect.engine.changelog import ChangelogGenerator
from mcp_git_collect.models.repo_snapshot import RepositorySnapshot, RevisionPointer


def _snapshot(marked, built):
    return RepositorySnapshot(
        scm_name="repo",
        remote_url=URL,
        built_revision=RevisionPointer(commit_id=built, label="master"),
        marked_revision=RevisionPointer(commit_id=marked, label="master"),
    )


def test_equal_revisions_is_noop(log, tmp_path):
    git = FakeGitClient()
    out = ChangelogGenerator(log).generate(tmp_path / "run", git, _snapshot(D, D))
    assert out is None
    assert git.changelog_calls == []
    assert not (tmp_path / "run").exists()


def test_writes_range_built_minus_marked(log, tmp_path):
    git = FakeGitClient(changelog=b"commit " + D.encode() + b"\n")
    out = ChangelogGenerator(log).generate(tmp_path, git, _snapshot(C, D))
    assert out is not None and out.parent == tmp_path
    assert out.name.startswith("changelog")
    assert out.read_bytes() == b"commit " + D.encode() + b"\n"
    assert git.changelog_calls == [(C, D)]


def test_unique_names(log, tmp_path):
    gen = ChangelogGenerator(log, prefix="cl-")
    first = gen.generate(tmp_path, FakeGitClient(), _snapshot(C, D))
    second = gen.generate(tmp_path, FakeGitClient(), _snapshot(C, D))
    assert first != second
    assert first.exists() and second.exists()


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits only")
def test_owner_only_permissions(log, tmp_path):
    out = ChangelogGenerator(log).generate(tmp_path, FakeGitClient(), _snapshot(C, D))
    assert stat.S_IMODE(out.stat().st_mode) == 0o600


@pytest.mark.parametrize("error", [GitError("bad range"), OSError("disk full"), KeyboardInterrupt()])
def test_failure_removes_partial_file(tmp_path, error):
    git = FakeGitClient(changelog=b"partial", changelog_error=error)
    with capture_logs() as logs:
        out = ChangelogGenerator(structlog.get_logger()).generate(tmp_path, git, _snapshot(C, D))
    assert out is None
    assert list(tmp_path.iterdir()) == []
    failed = [e for e in logs if e["event"] == "changelog.failed"]
    assert len(failed) == 1
    assert failed[0]["log_level"] == "warning"
    assert "[GitCollect]" in failed[0]["error"]


def test_real_repository(log, git_repo, tmp_path):
    run_dir = tmp_path / "run"
    out = ChangelogGenerator(log).generate(
        run_dir, GitPythonClient(git_repo.path), _snapshot(git_repo.first, git_repo.second)
    )
    text = out.read_text(encoding="utf-8")
    assert f"commit {git_repo.second}" in text
    assert f"commit {git_repo.first}" not in text
