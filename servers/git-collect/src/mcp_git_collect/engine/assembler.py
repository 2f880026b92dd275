# File: servers/git-collect/src/mcp_git_collect/engine/assembler.py
from __future__ import annotations

from typing import Any, Optional

from common.git_utils import GitClient, GitUrlError, humanish_name, is_commit_id

from ..errors import MissingRemoteError, UrlParseError
from ..models.repo_snapshot import RemoteRepository, RepositorySnapshot, RevisionPointer
from .resolver import HEAD, RevisionResolver


def remote_repository(url: str) -> RemoteRepository:
    try:
        return RemoteRepository(url=url, humanish_name=humanish_name(url))
    except GitUrlError as e:
        raise UrlParseError(url) from e


class RepositoryInfoAssembler:
    """Builds the RepositorySnapshot for one repository and one baseline."""

    def __init__(self, log: Any):
        self.log = log

    def assemble(self, git: GitClient, remote_name: str, marked_ref: Optional[str]) -> RepositorySnapshot:
        url = git.remote_url(remote_name)
        if not url:
            raise MissingRemoteError(remote_name)

        # blank means HEAD; anything else is kept verbatim for the label
        marked_ref = marked_ref if marked_ref and marked_ref.strip() else None
        reference_head = marked_ref or HEAD

        resolver = RevisionResolver(git, self.log)
        built_id = resolver.resolve_head(remote_name)
        marked_id = resolver.resolve(reference_head, remote_name)

        remote = remote_repository(url)

        # label keeps the ref as given, even when "<remote>/<ref>" is what resolved
        marked_label = marked_ref if marked_ref and not is_commit_id(marked_ref) else None

        snapshot = RepositorySnapshot(
            scm_name=remote.humanish_name,
            remote_url=remote.url,
            built_revision=RevisionPointer(commit_id=built_id, label=reference_head),
            marked_revision=RevisionPointer(commit_id=marked_id, label=marked_label),
        )
        self.log.info(
            "snapshot.assembled",
            scm=snapshot.scm_name,
            url=snapshot.remote_url,
            built=built_id,
            marked=marked_id,
            marked_label=marked_label,
        )
        return snapshot
