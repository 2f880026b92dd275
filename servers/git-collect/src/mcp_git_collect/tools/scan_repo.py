# File: servers/git-collect/src/mcp_git_collect/tools/scan_repo.py
"""
Worker side of the collector: everything that needs the checkout on disk.

The coordinator sends a ScanRequest as plain data and gets a ScanResponse
back as plain data; the git client is built here, against the worker's own
filesystem, and never crosses the boundary.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Optional

from common.git_utils import GitClient, GitPythonClient
from common.logging import get_logger

from ..engine.assembler import RepositoryInfoAssembler
from ..engine.changelog import ChangelogGenerator
from ..errors import NotARepositoryError, PathNotFoundError
from ..models.params import ScanRequest, ScanResponse

GitFactory = Callable[[Path], GitClient]


def check_path(value: Optional[str]) -> Optional[str]:
    """Form check for the `path` input; returns a warning or None."""
    if value and (value.startswith("/") or Path(value).is_absolute()):
        return "Paths should usually be relative to the workspace."
    return None


def resolve_repo_dir(workspace: str, path: Optional[str]) -> Path:
    root = Path(workspace)
    if path is None or not path.strip():
        return root
    return root / path.strip()


def scan_repo(
    request: ScanRequest,
    *,
    log: Any,
    git_factory: GitFactory = GitPythonClient,
    changelog_prefix: str = "changelog",
) -> ScanResponse:
    warning = check_path(request.path)
    if warning:
        log.warning("path.check", path=request.path, message=warning)

    repo_dir = resolve_repo_dir(request.workspace, request.path)
    if not repo_dir.is_dir():
        raise PathNotFoundError(str(repo_dir))
    log.info("stage.path_resolved", path=str(repo_dir))

    git = git_factory(repo_dir)
    if not git.probe_is_repository():
        raise NotARepositoryError(str(repo_dir))
    log.info("stage.repository_validated", path=str(repo_dir))

    snapshot = RepositoryInfoAssembler(log).assemble(git, request.remote, request.marked_commit)
    log.info("stage.revisions_resolved", built=snapshot.sha, marked=snapshot.marked_revision.commit_id)

    changelog_path = None
    if request.changelog_dir:
        out = ChangelogGenerator(log, prefix=changelog_prefix).generate(request.changelog_dir, git, snapshot)
        changelog_path = str(out) if out else None

    return ScanResponse(snapshot=snapshot, changelog_path=changelog_path)


def scan_repo_tool(
    params: Dict[str, Any],
    *,
    git_factory: GitFactory = GitPythonClient,
    changelog_prefix: str = "changelog",
) -> Dict[str, Any]:
    """
    MCP tool handler: validates the request dict, scans, and returns the
    ScanResponse as a JSON-ready dict.
    """
    request = ScanRequest.model_validate(params)
    log = get_logger("mcp.git-collect.scan", component="GitCollect", workspace=request.workspace)
    response = scan_repo(request, log=log, git_factory=git_factory, changelog_prefix=changelog_prefix)
    return response.model_dump(mode="json")
