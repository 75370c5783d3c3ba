"""
Platform detection and artifact naming.

Maps the kernel name and machine type reported by the platform module to
the OS family and architecture labels used in MCPify release artifact
names, e.g. ``mcpify-linux-amd64`` or ``mcpify-win-arm64.exe``.
"""

import platform
from dataclasses import dataclass
from typing import Optional

from mcpify_installer.config import TOOL_NAME
from mcpify_installer.errors import UnsupportedPlatformError


OS_MACOS = "macos"
OS_LINUX = "linux"
OS_WINDOWS = "win"

ARCH_AMD64 = "amd64"
ARCH_ARM64 = "arm64"

# Kernel name prefixes reported under MSYS2 and Cygwin
_WINDOWS_KERNEL_PREFIXES = ("MINGW", "MSYS", "CYGWIN")

_ARCH_ALIASES = {
    "x86_64": ARCH_AMD64,
    "amd64": ARCH_AMD64,
    "arm64": ARCH_ARM64,
    "aarch64": ARCH_ARM64,
}

WINDOWS_EXECUTABLE_SUFFIX = ".exe"


@dataclass(frozen=True)
class PlatformKey:
    """OS family and CPU architecture of an artifact."""

    os_family: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os_family == OS_WINDOWS

    def __str__(self) -> str:
        return f"{self.os_family}/{self.arch}"


def detect_os(system: Optional[str] = None) -> str:
    """
    Map a kernel name to an OS family.

    Args:
        system: Kernel name (defaults to platform.system())

    Returns:
        One of 'macos', 'linux', 'win'

    Raises:
        UnsupportedPlatformError: For any other kernel name
    """
    if system is None:
        system = platform.system()

    if system == "Darwin":
        return OS_MACOS
    if system == "Linux":
        return OS_LINUX
    if system in ("Windows_NT", "Windows") or system.upper().startswith(_WINDOWS_KERNEL_PREFIXES):
        return OS_WINDOWS

    raise UnsupportedPlatformError(f"Unsupported OS: {system}")


def detect_arch(machine: Optional[str] = None) -> str:
    """
    Map a machine type to an architecture label.

    Args:
        machine: Machine type (defaults to platform.machine())

    Returns:
        'amd64' or 'arm64'

    Raises:
        UnsupportedPlatformError: For unrecognized machine types
    """
    if machine is None:
        machine = platform.machine()

    arch = _ARCH_ALIASES.get(machine.lower())
    if arch is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")
    return arch


def detect_platform() -> PlatformKey:
    """Detect the platform key of the running system."""
    return PlatformKey(os_family=detect_os(), arch=detect_arch())


def executable_name(base: str, platform_key: PlatformKey) -> str:
    """Append the executable suffix for Windows, leave other names as is."""
    if platform_key.is_windows:
        return base + WINDOWS_EXECUTABLE_SUFFIX
    return base


def artifact_name(platform_key: PlatformKey, tool: str = TOOL_NAME) -> str:
    """
    Compose the release artifact name for a platform.

    Args:
        platform_key: Target OS family and architecture
        tool: Tool name prefix

    Returns:
        ``<tool>-<os>-<arch>``, with ``.exe`` appended on Windows
    """
    return executable_name(
        f"{tool}-{platform_key.os_family}-{platform_key.arch}", platform_key
    )
