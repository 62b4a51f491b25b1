"""Per-language default packages.

The table is static. Languages not listed get no defaults, which is not an
error: `flakegen myapp zig -p zig` is a perfectly good invocation.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

# Keys are matched case-sensitively. Order within each tuple is the order the
# packages appear in buildInputs.
LANGUAGE_PACKAGES = MappingProxyType(
    {
        "go": ("go",),
        "python": ("python3",),
        "rust": ("rustc", "cargo", "rustfmt", "rust-analyzer", "clippy"),
    }
)


def split_packages(raw: str) -> list[str]:
    """Split the `-p` flag value into package names.

    Empty input yields no packages. Otherwise the value is split on commas
    as-is: no whitespace trimming, and empty entries are kept.

    Example: "ripgrep,jq," → ["ripgrep", "jq", ""]
    """
    if not raw:
        return []
    return raw.split(",")


def resolve_packages(user_packages: Iterable[str], language: str) -> list[str]:
    """Return user packages followed by the defaults for `language`.

    No deduplication and no reordering.
    """
    return [*user_packages, *LANGUAGE_PACKAGES.get(language, ())]
