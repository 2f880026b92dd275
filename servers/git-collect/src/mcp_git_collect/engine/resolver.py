# File: servers/git-collect/src/mcp_git_collect/engine/resolver.py
from __future__ import annotations

from typing import Any, Optional

from common.git_utils import GitClient, GitError

from ..errors import RevisionResolutionError

HEAD = "HEAD"


class RevisionResolver:
    """
    Turns a reference into a commit id against one repository.

    A reference that does not resolve as given is retried as
    "<remote>/<ref>", so a branch that only exists as a remote-tracking ref
    (the usual state after a script clone) is still found.
    """

    def __init__(self, git: GitClient, log: Any):
        self.git = git
        self.log = log

    def resolve(self, ref: Optional[str], remote: str) -> str:
        target = ref.strip() if ref and ref.strip() else HEAD
        try:
            commit_id = self.git.resolve_reference(target)
            self.log.info("revision.resolved", ref=target, commit=commit_id)
            return commit_id
        except GitError as first:
            fallback = f"{remote}/{target}"
            self.log.debug("revision.retry", ref=target, fallback=fallback, error=str(first))
            try:
                commit_id = self.git.resolve_reference(fallback)
            except GitError as second:
                raise RevisionResolutionError(target, fallback) from second
            self.log.info("revision.resolved", ref=target, via=fallback, commit=commit_id)
            return commit_id

    def resolve_head(self, remote: str) -> str:
        # built state is whatever is checked out; no remote fallback
        try:
            commit_id = self.git.resolve_reference(HEAD)
        except GitError as e:
            raise RevisionResolutionError(HEAD) from e
        self.log.info("revision.resolved", ref=HEAD, commit=commit_id, remote=remote)
        return commit_id
