"""Error taxonomy for flakegen.

Every failure the CLI reports is one of these. The message is what goes to
stderr; the process then exits with FlakegenError.exit_code. All kinds share
the same exit code, so callers only ever see 0 or 1.

User-input errors (UsageError, FlagParseError) are expected. Template errors
indicate a defect in the static templates shipped with this package and
should never fire in a correct build.
"""

from __future__ import annotations


class FlakegenError(Exception):
    """Base class for all flakegen errors."""

    exit_code: int = 1


class UsageError(FlakegenError):
    """Raised when fewer than two positional arguments are supplied."""


class FlagParseError(FlakegenError):
    """Raised when the optional flags cannot be parsed."""


class ConfigError(FlakegenError):
    """Raised when FLAKEGEN_* environment configuration is invalid."""


class TemplateParseError(FlakegenError):
    """Raised when a static template fails to parse."""


class TemplateExecError(FlakegenError):
    """Raised when rendering fails on a descriptor/template mismatch."""
