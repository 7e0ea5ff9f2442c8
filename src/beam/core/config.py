"""Configuration for the BEAM tools.

Settings come from environment variables prefixed with `BEAM_`, from a
project `.env`, then from the per-user `.env` (see `get_user_env_file`).
The pure core functions take their options as arguments; only the CLI and
the adapters read `BeamSettings`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "BEAM_"


def get_user_config_dir() -> Path:
    """Per-user directory holding BEAM's global `.env`.

    `beam config --set` writes here, so the value applies from any working
    directory. Follows the platform convention (APPDATA, Application
    Support, XDG).
    """

    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or Path.home()) / "beam"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "beam"
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / "beam"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    """`KEY=VALUE` pairs of a dotenv file.

    Only the subset `beam config --set` writes is understood: comments,
    blank lines and one level of matching quotes. Anything else is skipped
    so a hand-edited file never blocks a write.
    """

    pairs: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            quote, value = value[0], value[1:-1]
            if quote == '"':
                value = value.replace('\\"', '"')
        pairs[key] = value
    return pairs


def _format_env_value(value: str) -> str:
    if any(ch.isspace() for ch in value) or "#" in value:
        return '"' + value.replace('"', '\\"') + '"'
    return value


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Merge `values` into the user's `.env` and return its path.

    Keys already in the file survive; the file is rewritten sorted by key so
    repeated `--set` calls give stable diffs.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged = _parse_env_lines(env_path.read_text(encoding="utf-8")) if env_path.exists() else {}
    merged.update(values)

    body = "".join(f"{key}={_format_env_value(merged[key])}\n" for key in sorted(merged))
    env_path.write_text("# beam user settings, see `beam config`\n" + body, encoding="utf-8")
    return env_path


class BeamSettings(BaseSettings):
    """Central settings for the CLI and the feed sources."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Project .env first, then the user's global one.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    strict: bool = Field(
        default=True,
        description="Reject feeds with any validation issue (False = lenient decoding).",
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation used when writing feeds (0 = compact).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per HTTP request (seconds).",
    )
    user_agent: str = Field(
        default="beam-feed/1.0",
        min_length=1,
        description="User-Agent sent when fetching feeds.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Root log level for the CLI.",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level
