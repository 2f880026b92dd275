"""
git-collect test fixtures.

FakeGitClient stands in for the GitPython adapter; `git_repo` builds a real
throwaway repository for the tests that exercise the adapter itself.

Run with: pytest tests/ -v
"""
from types import SimpleNamespace

import pytest
from git import Actor, Repo

from common.git_utils import GitError
from common.logging import get_logger

A = "1" * 40
B = "2" * 40
C = "3" * 40
D = "4" * 40

URL = "ssh://git@github.com:org/repo.git"


class FakeGitClient:
    """In-memory GitClient: refs map to commit ids, remotes map to URLs."""

    def __init__(self, refs=None, remotes=None, is_repo=True, changelog=b"", changelog_error=None,
                 validate_error=None):
        self.refs = dict(refs or {})
        self.remotes = dict(remotes if remotes is not None else {"origin": URL})
        self.is_repo = is_repo
        self.changelog = changelog
        self.changelog_error = changelog_error
        self.validate_error = validate_error
        self.resolved = []
        self.changelog_calls = []

    def resolve_reference(self, ref):
        self.resolved.append(ref)
        value = self.refs.get(ref)
        if isinstance(value, BaseException):
            raise value
        if value is None:
            raise GitError(f"unknown revision {ref}")
        return value

    def remote_url(self, name):
        return self.remotes.get(name)

    def probe_is_repository(self):
        if self.validate_error is not None:
            raise self.validate_error
        return self.is_repo

    def stream_changelog(self, exclude, include, out):
        self.changelog_calls.append((exclude, include))
        out.write(self.changelog)
        if self.changelog_error is not None:
            raise self.changelog_error


@pytest.fixture
def log():
    return get_logger("tests")


@pytest.fixture
def fake_git():
    return FakeGitClient(refs={"HEAD": D, "master": C})


@pytest.fixture
def git_repo(tmp_path):
    """
    Two-commit repository:
      baseline -> first commit, HEAD -> second commit,
      refs/remotes/origin/release -> first commit (remote-tracking only).
    """
    path = tmp_path / "checkout"
    repo = Repo.init(path)
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", "test@example.com")
    actor = Actor("Test User", "test@example.com")

    (path / "README.md").write_text("hello\n")
    repo.index.add(["README.md"])
    first = repo.index.commit("initial commit", author=actor, committer=actor)

    (path / "app.py").write_text("print('hi')\n")
    repo.index.add(["app.py"])
    second = repo.index.commit("add app", author=actor, committer=actor)

    repo.create_head("baseline", first)
    repo.create_remote("origin", "ssh://git@example.com:29418/team/widget.git")
    repo.git.update_ref("refs/remotes/origin/release", first.hexsha)

    return SimpleNamespace(repo=repo, path=path, first=first.hexsha, second=second.hexsha)
