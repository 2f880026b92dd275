# File: servers/git-collect/src/mcp_git_collect/server.py
from __future__ import annotations

import asyncio
import os
import uuid
from typing import Any, Dict, Literal, Optional

from mcp.server.fastmcp import FastMCP

from common.logging import get_logger

from .errors import handle_exception
from .settings import load_settings, make_run_id
from .tools.collect_git import collect_git_tool
from .tools.scan_repo import scan_repo_tool

logger = get_logger("mcp.git-collect.server")
settings = load_settings()
mcp = FastMCP("git-collect")

_JOBS: dict[str, dict[str, Any]] = {}


async def _run_collect_job(job_id: str, args: dict[str, Any]) -> None:
    job = _JOBS[job_id]
    job["status"] = "running"
    job["progress"] = 50.0
    job["message"] = "Collecting repository facts…"
    try:
        result = await asyncio.to_thread(collect_git_tool, args, settings=settings)
        job["result"] = result
        job["artifacts"] = [result["snapshot"]]
        job["status"] = "done"
        job["progress"] = 100.0
        job["message"] = "Repository registered." if result["added"] else "Repository already registered; build appended."
    except Exception as e:
        job["error"] = handle_exception(e, request_id=job_id)["error"]
        job["status"] = "error"
        job["message"] = "Collect failed."
        logger.warning("job.failed", job_id=job_id, error=job["error"]["message"])


@mcp.tool(name="git.collect.scan", title="Scan Local Git Checkout")
async def git_collect_scan(
    workspace: str,
    path: Optional[str] = None,
    marked_commit: Optional[str] = None,
    remote: Optional[str] = None,
    changelog_dir: Optional[str] = None,
) -> dict:
    # Worker side only: resolves revisions against this host's filesystem
    args = {
        "workspace": workspace,
        "path": path,
        "marked_commit": marked_commit,
        "remote": remote or settings.DEFAULT_REMOTE,
        "changelog_dir": changelog_dir,
    }
    try:
        return await asyncio.to_thread(
            scan_repo_tool, args, changelog_prefix=settings.CHANGELOG_PREFIX
        )
    except Exception as e:
        return {"status": "error", "error": handle_exception(e)["error"]}


@mcp.tool(name="git.collect.start", title="Start Git Collect")
async def git_collect_start(
    workspace: str,
    run_number: int,
    run_dir: Optional[str] = None,
    result: Optional[Literal["SUCCESS", "UNSTABLE", "FAILURE", "NOT_BUILT", "ABORTED"]] = None,
    path: Optional[str] = None,
    marked_commit: Optional[str] = None,
    remote: Optional[str] = None,
    changelog: bool = False,
) -> dict:
    run_dir = run_dir or os.path.join(settings.RUNS_DIR, make_run_id())
    try:
        os.makedirs(run_dir, exist_ok=True)
    except OSError as e:
        return {
            "job_id": None,
            "status": "error",
            "error": f"Invalid run_dir: {e}",
            "message": "Could not prepare run directory.",
        }

    job_id = uuid.uuid4().hex
    _JOBS[job_id] = {
        "status": "queued",
        "progress": 0.0,
        "message": "Collect queued.",
    }
    args = {
        "workspace": workspace,
        "run_dir": run_dir,
        "run_number": run_number,
        "result": result,
        "path": path,
        "marked_commit": marked_commit,
        "remote": remote,
        "changelog": changelog,
    }
    asyncio.get_running_loop().create_task(_run_collect_job(job_id, args))
    return {
        "job_id": job_id,
        "status": "queued",
        "progress": 0.0,
        "message": "Collect queued.",
        "run_dir": run_dir,
    }


@mcp.tool(name="git.collect.status", title="Check Collect Status")
async def git_collect_status(job_id: str) -> dict:
    job = _JOBS.get(job_id)
    if not job:
        return {
            "job_id": job_id,
            "status": "error",
            "error": "Unknown job_id",
            "message": "Job not found.",
        }

    out: Dict[str, Any] = {
        "job_id": job_id,
        "status": job.get("status", "error"),
        "progress": job.get("progress", None),
        "message": job.get("message", None),
    }
    if job.get("status") == "done":
        out["artifacts"] = job.get("artifacts", [])
        out["result"] = job.get("result")
    if job.get("status") == "error":
        out["error"] = job.get("error", "unknown error")
    out["next_cursor"] = None
    return out
