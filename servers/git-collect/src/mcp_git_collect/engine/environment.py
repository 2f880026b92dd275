# File: servers/git-collect/src/mcp_git_collect/engine/environment.py
from __future__ import annotations

import re
from typing import Dict, MutableMapping, Optional

from ..models.repo_snapshot import RepositorySnapshot

_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9_]")


def safe_name(scm_name: str) -> str:
    return _UNSAFE_RE.sub("_", scm_name)


def build_environment(
    snapshot: RepositorySnapshot,
    env: Optional[MutableMapping[str, str]] = None,
) -> MutableMapping[str, str]:
    """Set GIT_COMMIT/GIT_BRANCH/GIT_URL and their scm-qualified variants."""
    env = {} if env is None else env
    values: Dict[str, str] = {
        "GIT_COMMIT": snapshot.sha,
        "GIT_BRANCH": snapshot.branch or "",
        "GIT_URL": snapshot.remote_url,
    }
    suffix = safe_name(snapshot.scm_name)
    for key, value in values.items():
        env[key] = value
        env[f"{key}_{suffix}"] = value
    return env
