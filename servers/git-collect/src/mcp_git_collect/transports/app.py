# servers/git-collect/src/mcp_git_collect/transports/app.py
"""ASGI entry point for `uvicorn mcp_git_collect.transports.app:app`."""
from __future__ import annotations

import contextlib

from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from ..server import mcp, settings


async def health(_request):
    return JSONResponse(
        {
            "status": "ok",
            "name": "mcp-git-collect",
            "endpoint": mcp.settings.streamable_http_path,
            "default_remote": settings.DEFAULT_REMOTE,
            "runs_dir": settings.RUNS_DIR,
        }
    )


@contextlib.asynccontextmanager
async def lifespan(_app: Starlette):
    # POST to the MCP endpoint needs the session manager running
    async with mcp.session_manager.run():
        yield


app = Starlette(
    routes=[
        Route("/health", endpoint=health, methods=["GET"]),
        Mount("/", app=mcp.streamable_http_app()),
    ],
    lifespan=lifespan,
)
