"""Host platform → Nix system string.

Nix names systems `<arch>-<os>` (x86_64-linux, aarch64-darwin, ...). Python
and other toolchains report some architectures under different names, so the
common aliases are mapped. Anything unrecognised is passed through unchanged:
the generated flake may then name a system Nix does not know, which Nix will
report when the flake is evaluated.
"""

from __future__ import annotations

import logging
import platform

logger = logging.getLogger(__name__)

_ARCH_MAP = {
    "amd64": "x86_64",
    "arm64": "aarch64",
}

_OS_MAP = {
    "linux": "linux",
    "darwin": "darwin",
}


def host_arch() -> str:
    """Architecture of the running interpreter, lowercased (e.g. "x86_64")."""
    return platform.machine().lower()


def host_os() -> str:
    """Operating system of the running interpreter, lowercased (e.g. "linux")."""
    return platform.system().lower()


def nix_system(arch: str | None = None, os_name: str | None = None) -> str:
    """Map an architecture/OS pair to a Nix system string.

    Args:
        arch: Architecture name. Read from the host when omitted.
        os_name: Operating system name. Read from the host when omitted.

    Returns:
        The Nix system string, arch first (e.g. "x86_64-linux").
    """
    if arch is None:
        arch = host_arch()
    if os_name is None:
        os_name = host_os()

    if arch not in _ARCH_MAP.values() and arch not in _ARCH_MAP:
        logger.debug("Unmapped architecture '%s', passing through", arch)
    if os_name not in _OS_MAP:
        logger.debug("Unmapped operating system '%s', passing through", os_name)

    return f"{_ARCH_MAP.get(arch, arch)}-{_OS_MAP.get(os_name, os_name)}"
