#servers/git-collect/src/mcp_git_collect/models/params.py

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .build_record import BuildResult
from .repo_snapshot import RepositorySnapshot


class ScanRequest(BaseModel):
    """
    What crosses the boundary to the worker that owns the checkout:
      - workspace: Absolute path of the run's workspace on the worker
      - path: Optional repository directory relative to the workspace
      - marked_commit: Optional baseline (branch, tag or 40-hex commit id)
      - remote: Remote whose URL identifies the repository
      - changelog_dir: When set, write the changelog artifact into this directory
    """

    workspace: str = Field(min_length=1)
    path: Optional[str] = None
    marked_commit: Optional[str] = None
    remote: str = Field(default="origin", min_length=1)
    changelog_dir: Optional[str] = None


class ScanResponse(BaseModel):
    snapshot: RepositorySnapshot
    changelog_path: Optional[str] = None


class CollectGitParams(BaseModel):
    """
    Input parameters for the collect tool:
      - workspace: Absolute path of the run's workspace
      - run_dir: The run's private directory (record store, changelog files)
      - run_number: Number of the run registering the repository
      - result: Current result of the run (SUCCESS while still running)
      - path / marked_commit / remote: see ScanRequest
      - changelog: Generate a changelog between marked and built revisions
    """

    workspace: str = Field(min_length=1)
    run_dir: str = Field(min_length=1)
    run_number: int = Field(ge=0)
    result: Optional[BuildResult] = None
    path: Optional[str] = None
    marked_commit: Optional[str] = None
    remote: Optional[str] = None
    changelog: bool = False
