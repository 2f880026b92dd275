# File: servers/git-collect/src/mcp_git_collect/errors.py
"""Error taxonomy for the collector.

Fatal errors abort the operation and surface verbatim as the step's failure
message. ``ChangelogGenerationError`` and ``NotificationError`` are recovered
where they happen and only ever reach the logs.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

PREFIX = "[GitCollect]"


class GitCollectError(Exception):
    """Base exception, renderable as a JSON-RPC error for MCP clients."""

    code: int = -32001
    stage: str = "collect"
    fatal: bool = True

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.message = f"{PREFIX} {message}"
        super().__init__(self.message)
        self.data = {"stage": self.stage, **(data or {})}

    def to_json_rpc_error(self, request_id: Optional[str] = None) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "error": {"code": self.code, "message": self.message, "data": self.data},
            "id": request_id,
        }


class PathNotFoundError(GitCollectError):
    code = -32003
    stage = "path"

    def __init__(self, path: str):
        super().__init__(f"Error: path not found: {path}", {"path": path})


class NotARepositoryError(GitCollectError):
    stage = "validate"

    def __init__(self, path: str):
        super().__init__(
            f"Error: the directory '{path}' is not a valid repository", {"path": path}
        )


class RevisionResolutionError(GitCollectError):
    stage = "resolve"

    def __init__(self, ref: str, fallback: Optional[str] = None):
        tried = f" (also tried '{fallback}')" if fallback else ""
        super().__init__(
            f"could not resolve revision '{ref}'{tried}",
            {"ref": ref, "fallback": fallback},
        )
        self.ref = ref
        self.fallback = fallback


class MissingRemoteError(GitCollectError):
    stage = "resolve"

    def __init__(self, remote: str):
        super().__init__(f"no URL configured for remote '{remote}'", {"remote": remote})


class UrlParseError(GitCollectError):
    stage = "resolve"

    def __init__(self, url: str):
        super().__init__(f"unable to derive a name from the remote URL '{url}'", {"url": url})


class ChangelogGenerationError(GitCollectError):
    stage = "changelog"
    fatal = False


class NotificationError(GitCollectError):
    stage = "notify"
    fatal = False


def handle_exception(exception: BaseException, request_id: Optional[str] = None) -> Dict[str, Any]:
    """Convert any exception raised by a tool into a JSON-RPC error response."""
    if isinstance(exception, GitCollectError):
        return exception.to_json_rpc_error(request_id)
    code = -32602 if isinstance(exception, ValueError) else -32603
    return {
        "jsonrpc": "2.0",
        "error": {
            "code": code,
            "message": f"{PREFIX} {exception}",
            "data": {"original_error": type(exception).__name__},
        },
        "id": request_id,
    }
