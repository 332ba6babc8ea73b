"""SDK configuration.

Responsibility:
- Reads the Geocore base URL, project ID and HTTP options from environment
  variables (pydantic-settings) or `.env` files.
- Manages the per-user `.env` written by `geocore doctor configure`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_DIR_NAME = "geocore"
USER_ENV_HEADER = "# Geocore SDK user config (.env)"


def get_user_config_dir() -> Path:
    """Directory holding the `.env` written by `geocore doctor configure`.

    `%APPDATA%/geocore` on Windows, `~/Library/Application Support/geocore` on
    macOS and `$XDG_CONFIG_HOME/geocore` (default `~/.config/geocore`) elsewhere.
    """

    if sys.platform.startswith("win"):
        root = Path(os.environ.get("APPDATA", str(Path.home())))
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Application Support"
    else:
        root = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return root / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def read_user_env_vars(env_path: Path | None = None) -> dict[str, str]:
    """`KEY=value` pairs stored in the user `.env` (empty when the file is missing).

    Comments, blank lines and lines without `=` are skipped; surrounding quotes
    are removed from values.
    """

    env_path = env_path or get_user_env_file()
    if not env_path.exists():
        return {}

    pairs: dict[str, str] = {}
    for line in env_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        key, sep, value = line.partition("=")
        if line.startswith("#") or not sep or not key.strip():
            continue
        pairs[key.strip()] = value.strip().strip('"').strip("'")
    return pairs


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Merge `GEOCORE_*` settings into the user `.env` and return its path.

    `None` leaves a stored key untouched. Keys that are not ours are kept.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged = read_user_env_vars(env_path)
    merged.update({key: value for key, value in values.items() if value is not None})

    lines = [USER_ENV_HEADER, *(f"{key}={merged[key]}" for key in sorted(merged))]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class GeocoreSettings(BaseSettings):
    """Central configuration of the SDK."""

    model_config = SettingsConfigDict(
        env_prefix="GEOCORE_",
        extra="ignore",
        case_sensitive=False,
        # project first (dev), then the user's global config
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str | None = Field(
        default=None,
        description="Base URL of the Geocore API, e.g. https://api.geocore.jp/api.",
    )
    project_id: str | None = Field(
        default=None,
        description="Geocore project ID (PRO-...).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="geocore-sdk/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    default_user_name: str = Field(
        default="DEFAULT",
        min_length=1,
        description="Device name used to derive the default user identity.",
    )
    downgrade_binary_urls: bool = Field(
        default=True,
        description="Rewrite https binary URLs to http before handing them out.",
    )
