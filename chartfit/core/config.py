from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Settings:
    renderer: str = "vl-convert"
    default_width: int = 800
    default_height: int = 400
    max_render_concurrency: int = 4
    log_level: str = "INFO"
    json_logs: bool = False
    mcp_transport: str = "stdio"
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8080


def _read_env_file() -> dict[str, str]:
    """Load minimal .env to support CHARTFIT_* keys if not in the environment.

    We intentionally do not overwrite existing os.environ values.
    """
    env_path = Path.cwd() / ".env"
    env: dict[str, str] = {}
    if not env_path.exists():
        return env
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            env[k] = v
    except OSError:
        # Unreadable .env falls back to process environment only
        return {}
    return env


def _get_env(
    name: str,
    fallback_names: list[str] | None = None,
    env_file: dict[str, str] | None = None,
) -> str | None:
    # Priority: process env -> .env -> fallback names
    val = os.getenv(name)
    if val:
        return val
    if env_file and name in env_file:
        return env_file[name]
    if fallback_names:
        for fb in fallback_names:
            v = os.getenv(fb)
            if v:
                return v
            if env_file and fb in env_file:
                return env_file[fb]
    return None


def _as_int(raw: str | None, default: int, minimum: int = 1) -> int:
    if raw is None:
        return default
    try:
        return max(minimum, int(float(raw)))
    except ValueError:
        return default


def _as_bool(raw: str | None, default: bool = False) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def get_settings() -> Settings:
    env_file = _read_env_file()
    renderer = _get_env("CHARTFIT_RENDERER", ["RENDERER"], env_file)
    width = _get_env("CHARTFIT_DEFAULT_WIDTH", None, env_file)
    height = _get_env("CHARTFIT_DEFAULT_HEIGHT", None, env_file)
    concurrency = _get_env("CHARTFIT_MAX_RENDER_CONCURRENCY", None, env_file)
    log_level = _get_env("CHARTFIT_LOG_LEVEL", ["LOG_LEVEL"], env_file)
    json_logs = _get_env("CHARTFIT_JSON_LOGS", None, env_file)
    transport = _get_env("CHARTFIT_MCP_TRANSPORT", ["MCP_TRANSPORT"], env_file)
    host = _get_env("CHARTFIT_MCP_HOST", ["HOST"], env_file)
    port = _get_env("CHARTFIT_MCP_PORT", ["PORT"], env_file)
    return Settings(
        renderer=renderer or "vl-convert",
        default_width=_as_int(width, 800),
        default_height=_as_int(height, 400),
        max_render_concurrency=_as_int(concurrency, 4),
        log_level=(log_level or "INFO").upper(),
        json_logs=_as_bool(json_logs),
        mcp_transport=(transport or "stdio").lower(),
        mcp_host=host or "0.0.0.0",
        mcp_port=_as_int(port, 8080),
    )
