# File: servers/git-collect/src/mcp_git_collect/models/build_record.py
from __future__ import annotations

from typing import Dict, FrozenSet, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .repo_snapshot import RevisionPointer

BuildResult = Literal["SUCCESS", "UNSTABLE", "FAILURE", "NOT_BUILT", "ABORTED"]


class Build(BaseModel):
    model_config = ConfigDict(frozen=True)

    marked_revision: RevisionPointer
    built_revision: RevisionPointer
    run_number: int = Field(ge=0)
    result: BuildResult = "SUCCESS"


class BuildRecord(BaseModel):
    """
    One repository as seen by a run: the remote URLs it stands for and the
    history of builds registered against it. `index` tells records apart when
    a run registers more than one repository; the first record has none.
    """
    model_config = ConfigDict(frozen=True)

    scm_name: str = Field(min_length=1)
    remote_urls: FrozenSet[str] = Field(min_length=1)
    builds: Tuple[Build, ...] = ()
    index: Optional[int] = Field(default=None, ge=1)

    def is_similar_to(self, other: "BuildRecord") -> bool:
        return self.scm_name == other.scm_name and self.remote_urls == other.remote_urls

    def with_build(self, build: Build) -> "BuildRecord":
        return self.model_copy(update={"builds": self.builds + (build,)})

    @property
    def last_build(self) -> Optional[Build]:
        return self.builds[-1] if self.builds else None

    @property
    def builds_by_branch_name(self) -> Dict[str, Build]:
        # later builds win
        out: Dict[str, Build] = {}
        for b in self.builds:
            if b.built_revision.label:
                out[b.built_revision.label] = b
        return out
