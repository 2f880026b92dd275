# File: servers/git-collect/src/mcp_git_collect/settings.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.logging import configure_logging, get_logger


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GIT_COLLECT_", extra="ignore")

    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=True)

    DEFAULT_REMOTE: str = Field(default="origin", min_length=1)

    # run directories for jobs that do not name one
    RUNS_DIR: str = Field(default=".runs")
    RECORDS_FILE: str = Field(default="build-records.json")
    CHANGELOG_PREFIX: str = Field(default="changelog")
    # run with the changelog path as last argument once a changelog is written
    CHANGELOG_HOOK: Optional[str] = Field(default=None)
    CHANGELOG_HOOK_TIMEOUT: float = Field(default=60.0, gt=0)

    # SDK runner; read without the GIT_COLLECT_ prefix like the other servers
    MCP_TRANSPORT: Literal["stdio", "sse", "streamable-http"] = Field(
        default="streamable-http", validation_alias="MCP_TRANSPORT"
    )
    MCP_HOST: str = Field(default="0.0.0.0", validation_alias="MCP_HOST")
    MCP_PORT: int = Field(default=8000, validation_alias="MCP_PORT")
    MCP_MOUNT_PATH: str = Field(default="/mcp", validation_alias="MCP_MOUNT_PATH")

    @field_validator("MCP_TRANSPORT", mode="before")
    @classmethod
    def _normalize_transport(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


def load_settings() -> Settings:
    cfg = Settings()
    configure_logging(cfg.LOG_LEVEL, service_name="mcp-git-collect", structured=cfg.LOG_JSON)
    get_logger("mcp.git-collect.settings").debug(
        "settings.loaded", default_remote=cfg.DEFAULT_REMOTE, runs_dir=cfg.RUNS_DIR
    )
    return cfg


def make_run_id() -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    return f"gc_{ts}"
