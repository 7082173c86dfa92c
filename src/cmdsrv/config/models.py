"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cmdsrv.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- cmdsrv.toml sections ---


class ServerConfig(BaseModel):
    """[server] section."""

    model_config = {"frozen": True}

    host: str = "127.0.0.1"
    port: int = Field(default=7878, ge=0, le=65535)
    max_message_bytes: int = Field(default=1024 * 1024, gt=0)
    read_timeout: float | None = 30.0


class ProtocolConfig(BaseModel):
    """[protocol] section."""

    model_config = {"frozen": True}

    require_uuid: bool = True


class BatchConfig(BaseModel):
    """[batch] section."""

    model_config = {"frozen": True}

    max_depth: int = Field(default=8, ge=1)
