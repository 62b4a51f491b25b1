"""flakegen configuration — centralized environment variable management.

Everything here is optional. With no variables set, flakegen renders exactly
the flake it always has; the settings only exist for hosts that need to pin a
different nixpkgs input or generate for another platform.

No module should call os.environ directly. Import settings from here instead.

Usage:
    from flakegen.config import get_settings

    settings = get_settings()
    url = settings.nixpkgs_url

Environment variables:

  Optional:
    FLAKEGEN_NIXPKGS_URL  — Flake input URL for nixpkgs.
                            Default: "nixpkgs/nixos-unstable".
    FLAKEGEN_SYSTEM       — Nix system string to emit instead of the one
                            computed from the host (e.g. "aarch64-linux").
    FLAKEGEN_LOG_LEVEL    — Logging level for diagnostics on stderr.
                            Default: "WARNING".
    LOGFIRE_TOKEN         — Logfire project token for tracing.
                            If unset, nothing is exported.
"""

from __future__ import annotations

import re
from functools import lru_cache

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flakegen.errors import ConfigError

DEFAULT_NIXPKGS_URL = "nixpkgs/nixos-unstable"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# <arch>-<os>, e.g. x86_64-linux, aarch64-darwin, armv7l-linux.
_SYSTEM_RE = re.compile(r"^[a-z0-9_]+-[a-z0-9_]+$")


class FlakegenSettings(BaseSettings):
    """Centralized configuration for flakegen.

    Field names map to env vars by uppercasing and prefixing:
    nixpkgs_url → FLAKEGEN_NIXPKGS_URL.

    Instantiate via get_settings() to benefit from caching.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLAKEGEN_",
        # .env files are for development; real env vars take precedence.
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Rendering ────────────────────────────────────────────────────────────

    nixpkgs_url: str = DEFAULT_NIXPKGS_URL
    """URL of the nixpkgs flake input written into `inputs.nixpkgs.url`."""

    system: str | None = None
    """Override for the computed Nix system string.

    When None, the platform identifier is derived from the running host.
    """

    # ── Observability ────────────────────────────────────────────────────────

    log_level: str = "WARNING"
    """Level for stderr logging. stdout is reserved for the rendered flake."""

    logfire_token: SecretStr | None = Field(default=None, validation_alias="LOGFIRE_TOKEN")
    """Logfire project token. If unset, spans stay local."""

    # ── Validators ───────────────────────────────────────────────────────────

    @field_validator("nixpkgs_url")
    @classmethod
    def validate_nixpkgs_url(cls, v: str) -> str:
        if not v.strip():
            msg = "FLAKEGEN_NIXPKGS_URL must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("system")
    @classmethod
    def validate_system(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not _SYSTEM_RE.match(v):
            msg = f"FLAKEGEN_SYSTEM '{v}' is invalid. Expected <arch>-<os> (e.g. 'x86_64-linux')"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            msg = f"FLAKEGEN_LOG_LEVEL '{v}' is invalid. Known levels: {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level


@lru_cache(maxsize=1)
def get_settings() -> FlakegenSettings:
    """Return the cached FlakegenSettings instance.

    Reads from environment on first call, then caches for the process lifetime.
    Call clear_settings_cache() in tests to reset between test cases.

    Raises:
        ConfigError: If any FLAKEGEN_* variable fails validation.
    """
    try:
        return FlakegenSettings()
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Use in tests that need to vary environment variables between cases:

        def test_something(monkeypatch):
            monkeypatch.setenv("FLAKEGEN_SYSTEM", "aarch64-linux")
            clear_settings_cache()
            settings = get_settings()
            ...
    """
    get_settings.cache_clear()
