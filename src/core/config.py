"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (HTTP/BigQuery) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user config directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "pypi-snapshot"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "pypi-snapshot"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "pypi-snapshot"
    return Path.home() / ".config" / "pypi-snapshot"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# pypi-snapshot user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application configuration.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without leaking logic into the core.
    - A single configuration contract for CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="PYPI_SNAPSHOT_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    simple_base: str = Field(
        default="https://mirrors.tuna.tsinghua.edu.cn/pypi/web/simple",
        min_length=8,
        description="Base of the simple index (listing pages).",
    )
    package_base: str = Field(
        default="https://mirrors.tuna.tsinghua.edu.cn/pypi/web/packages",
        min_length=8,
        description="Base every artifact URL must live under.",
    )
    bq_query: bool = Field(
        default=False,
        description="Discover the 1000 most downloaded packages via BigQuery instead of the full index.",
    )
    keep_recent: int | None = Field(
        default=None,
        ge=1,
        description="Only keep the N most recent versions per package.",
    )
    debug: bool = Field(
        default=False,
        description="Only parse the first 1000 characters of the index (full scan only).",
    )

    concurrent_resolve: int = Field(
        default=64,
        ge=1,
        le=1024,
        description="Maximum number of listing pages fetched at once.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="pypi-snapshot/0.1",
        min_length=1,
        description="User-Agent for index requests.",
    )

    project_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PYPI_SNAPSHOT_PROJECT_ID", "PROJECT_ID"),
        description="Google Cloud project billed for the popularity query.",
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum loguru level for console output.",
    )

    @field_validator("simple_base")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()
