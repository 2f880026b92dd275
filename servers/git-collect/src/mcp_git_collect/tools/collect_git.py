# File: servers/git-collect/src/mcp_git_collect/tools/collect_git.py
from __future__ import annotations

import functools
import os
import shlex
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, List, MutableMapping, Optional, Sequence

from pydantic import BaseModel

from common.logging import get_logger

from ..engine.environment import build_environment
from ..engine.registry import register
from ..errors import NotificationError
from ..models.build_record import BuildRecord
from ..models.params import CollectGitParams, ScanRequest, ScanResponse
from ..models.repo_snapshot import RepositorySnapshot
from ..settings import Settings
from ..utils.storage import load_records, records_path, save_records
from .scan_repo import scan_repo_tool

# Sends a ScanRequest dict to whichever worker owns the checkout.
Dispatch = Callable[[Dict[str, Any]], Dict[str, Any]]
ChangelogListener = Callable[[RepositorySnapshot, Path], None]


class CollectResult(BaseModel):
    snapshot: RepositorySnapshot
    added: bool
    records: List[BuildRecord]
    changelog_path: Optional[str] = None
    env: Dict[str, str] = {}


def notify_listeners(
    listeners: Sequence[ChangelogListener],
    snapshot: RepositorySnapshot,
    changelog_path: Path,
    log: Any,
) -> None:
    for listener in listeners:
        try:
            listener(snapshot, changelog_path)
        except Exception as e:
            err = NotificationError(
                f"changelog listener {getattr(listener, '__name__', listener)!r} failed: {e}",
                {"changelog": str(changelog_path)},
            )
            log.warning("changelog.notify_failed", error=err.message)


def announce_changelog(log: Any) -> ChangelogListener:
    def announce(snapshot: RepositorySnapshot, changelog_path: Path) -> None:
        log.info(
            "changelog.ready",
            scm=snapshot.scm_name,
            marked=snapshot.marked_revision.commit_id,
            built=snapshot.sha,
            path=str(changelog_path),
        )
    return announce


def hook_listener(command: str, timeout: float, log: Any) -> ChangelogListener:
    """
    Runs `command` with the changelog path appended as its last argument.

    The snapshot facts are passed in the GIT_COMMIT / GIT_BRANCH / GIT_URL
    environment of the child process. A non-zero exit or a timeout raises,
    which `notify_listeners` reports as a NotificationError.
    """
    argv = shlex.split(command)

    def run_hook(snapshot: RepositorySnapshot, changelog_path: Path) -> None:
        cmd = [*argv, str(changelog_path)]
        log.debug("changelog.hook", cmd=" ".join(shlex.quote(p) for p in cmd))
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=build_environment(snapshot, dict(os.environ)),
            )
        except subprocess.TimeoutExpired as te:
            raise RuntimeError(f"changelog hook timed out after {timeout}s") from te
        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            raise RuntimeError(f"changelog hook exited with {proc.returncode}: {stderr[:200]}")
    run_hook.__name__ = argv[0] if argv else "changelog-hook"
    return run_hook


def changelog_listeners(settings: Settings, log: Any) -> List[ChangelogListener]:
    listeners = [announce_changelog(log)]
    if settings.CHANGELOG_HOOK:
        listeners.append(hook_listener(settings.CHANGELOG_HOOK, settings.CHANGELOG_HOOK_TIMEOUT, log))
    return listeners


def collect_git(
    params: CollectGitParams,
    *,
    settings: Settings,
    log: Any,
    dispatch: Optional[Dispatch] = None,
    listeners: Sequence[ChangelogListener] = (),
    env: Optional[MutableMapping[str, str]] = None,
) -> CollectResult:
    """
    Register an externally checked-out repository with a run.

    The scan happens behind `dispatch`; fatal scan errors propagate unchanged.
    The record store under `run_dir` is read and rewritten here, and the
    environment is only published when the repository is new to the run.
    """
    dispatch = dispatch or functools.partial(scan_repo_tool, changelog_prefix=settings.CHANGELOG_PREFIX)
    request = ScanRequest(
        workspace=params.workspace,
        path=params.path,
        marked_commit=params.marked_commit,
        remote=params.remote or settings.DEFAULT_REMOTE,
        changelog_dir=params.run_dir if params.changelog else None,
    )
    log.info("collect.begin", path=params.path, marked=request.marked_commit or "HEAD", remote=request.remote)

    response = ScanResponse.model_validate(dispatch(request.model_dump(mode="json")))
    snapshot = response.snapshot

    if response.changelog_path:
        notify_listeners(listeners, snapshot, Path(response.changelog_path), log)
    log.info("stage.changelog_optional", changelog=response.changelog_path)

    store = records_path(params.run_dir, settings.RECORDS_FILE)
    records, added = register(load_records(store), snapshot, params.run_number, params.result)
    save_records(store, records)
    log.info(
        "stage.record_registered",
        scm=snapshot.scm_name,
        added=added,
        records=len(records),
        marked=request.marked_commit or "HEAD",
        built=snapshot.sha,
    )

    published: Dict[str, str] = {}
    if added:
        published = dict(build_environment(snapshot))
        if env is not None:
            env.update(published)
        log.info("stage.env_published", keys=sorted(published))
    else:
        log.info("env.skipped", reason="repository already registered in this run")

    return CollectResult(
        snapshot=snapshot,
        added=added,
        records=records,
        changelog_path=response.changelog_path,
        env=published,
    )


def collect_git_tool(
    params: Dict[str, Any],
    *,
    settings: Settings,
    dispatch: Optional[Dispatch] = None,
    listeners: Optional[Sequence[ChangelogListener]] = None,
) -> Dict[str, Any]:
    validated = CollectGitParams.model_validate(params)
    log = get_logger(
        "mcp.git-collect.collect",
        component="GitCollect",
        run_number=validated.run_number,
    )
    if listeners is None:
        listeners = changelog_listeners(settings, log)
    result = collect_git(validated, settings=settings, log=log, dispatch=dispatch, listeners=listeners)
    return result.model_dump(mode="json")
