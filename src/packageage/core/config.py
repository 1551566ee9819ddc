"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP, host settings) and services read the same values.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "packageage"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "packageage"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "packageage"
    return Path.home() / ".config" / "packageage"


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
    """Write/update variables in the user's global .env, keeping unrelated keys."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        try:
            existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        except OSError:
            existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# packageage user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


def default_host_settings_path() -> Path:
    return Path.home() / ".claude" / "settings.json"


class AppSettings(BaseSettings):
    """Central application configuration.

    Every value can be overridden with a `PACKAGEAGE_<FIELD>` env var.
    """

    model_config = SettingsConfigDict(
        env_prefix="PACKAGEAGE_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    registry_url: str = Field(
        default="https://registry.npmjs.org",
        min_length=8,
        description="Base URL of the npm-compatible registry.",
    )
    http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout per registry request (seconds).",
    )
    user_agent: str = Field(
        default="packageage/0.1 (+https://github.com/packageage)",
        min_length=1,
        description="User-Agent sent to the registry.",
    )

    stale_threshold_days: int = Field(
        default=365,
        ge=0,
        description="Days without a publish after which a package is stale.",
    )
    abandoned_threshold_days: int = Field(
        default=730,
        ge=0,
        description="Days without a publish after which a package is possibly abandoned.",
    )

    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum registry fetches in flight at once.",
    )
    total_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Deadline for the whole registry fan-out (seconds).",
    )

    shell_tool_names: list[str] = Field(
        default_factory=lambda: ["Bash"],
        description="Tool names whose input is a shell command.",
    )
    host_settings_path: Path = Field(
        default_factory=default_host_settings_path,
        description="Host settings JSON where the hook is registered.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for stderr diagnostics.",
    )

    @model_validator(mode="after")
    def _check_thresholds(self) -> "AppSettings":
        if self.abandoned_threshold_days < self.stale_threshold_days:
            raise ValueError("abandoned_threshold_days must be >= stale_threshold_days")
        return self
