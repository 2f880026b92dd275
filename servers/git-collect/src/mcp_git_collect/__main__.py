# servers/git-collect/src/mcp_git_collect/__main__.py
from __future__ import annotations

import sys
from typing import Optional, Sequence

from .server import logger, mcp, settings

USAGE = """\
usage: python -m mcp_git_collect

Registers externally checked-out git repositories with a build run.

Environment:
  MCP_TRANSPORT   stdio | sse | streamable-http (default streamable-http)
  MCP_HOST        bind address (default 0.0.0.0)
  MCP_PORT        port (default 8000)
  MCP_MOUNT_PATH  streamable HTTP endpoint (default /mcp)
  GIT_COLLECT_*   collector settings (DEFAULT_REMOTE, RUNS_DIR, CHANGELOG_HOOK, ...)
"""


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if any(a in ("-h", "--help") for a in argv):
        sys.stderr.write(USAGE)
        return 0

    mcp.settings.host = settings.MCP_HOST
    mcp.settings.port = settings.MCP_PORT
    if settings.MCP_TRANSPORT == "streamable-http":
        mcp.settings.streamable_http_path = settings.MCP_MOUNT_PATH

    logger.info(
        "server.starting",
        transport=settings.MCP_TRANSPORT,
        host=settings.MCP_HOST,
        port=settings.MCP_PORT,
        hook=bool(settings.CHANGELOG_HOOK),
    )
    mcp.run(transport=settings.MCP_TRANSPORT)
    return 0


if __name__ == "__main__":
    sys.exit(main())
