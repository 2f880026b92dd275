# File: servers/git-collect/src/mcp_git_collect/models/repo_snapshot.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

COMMIT_ID_PATTERN = r"^[0-9a-fA-F]{40}$"


class RemoteRepository(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    humanish_name: str = Field(min_length=1)


class RevisionPointer(BaseModel):
    """
    A commit id plus the symbolic name it was reached through, if any.
    `label` stays None when the input was itself a raw commit id.
    """
    model_config = ConfigDict(frozen=True)

    commit_id: str = Field(pattern=COMMIT_ID_PATTERN)
    label: Optional[str] = None

    @field_validator("commit_id")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.lower()


class RepositorySnapshot(BaseModel):
    """
    Remote and revision facts captured in one resolution pass.
    Frozen: the registry and the environment publisher only read it.
    """
    model_config = ConfigDict(frozen=True)

    scm_name: str = Field(min_length=1)
    remote_url: str = Field(min_length=1)
    built_revision: RevisionPointer
    marked_revision: RevisionPointer

    @property
    def branch(self) -> Optional[str]:
        return self.built_revision.label

    @property
    def sha(self) -> str:
        return self.built_revision.commit_id

    @property
    def has_changes(self) -> bool:
        return self.marked_revision.commit_id != self.built_revision.commit_id
