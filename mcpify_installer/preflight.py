"""
Preflight checks.

Verifies, before anything is downloaded, that the capabilities an
installation run relies on are present: system information, a writable
temporary location, SHA-256 support and an HTTPS-capable HTTP client.
"""

import hashlib
import logging
import os
import platform
import tempfile
from typing import Callable, List, Optional, Tuple

from mcpify_installer.errors import MissingRequirementError

logger = logging.getLogger(__name__)


def _has_system_info() -> bool:
    return bool(platform.system()) and bool(platform.machine())


def _has_temp_location(temp_dir: Optional[str]) -> bool:
    directory = temp_dir or tempfile.gettempdir()
    return os.path.isdir(directory) and os.access(directory, os.W_OK | os.X_OK)


def _has_sha256() -> bool:
    return "sha256" in hashlib.algorithms_available


def _has_https_client() -> bool:
    try:
        import ssl  # noqa: F401

        import httpx  # noqa: F401
    except ImportError:
        return False
    return True


def collect_missing(temp_dir: Optional[str] = None) -> List[str]:
    """
    List the capabilities that are missing on this system.

    Args:
        temp_dir: Directory temporary files will be created in
            (None = system default)

    Returns:
        Human-readable names of missing capabilities, empty if none
    """
    checks: List[Tuple[str, Callable[[], bool]]] = [
        ("system information (platform)", _has_system_info),
        ("temporary file location", lambda: _has_temp_location(temp_dir)),
        ("SHA-256 digest support (hashlib)", _has_sha256),
        ("HTTPS client (httpx with ssl)", _has_https_client),
    ]

    missing = []
    for name, check in checks:
        if check():
            logger.debug(f"Preflight OK: {name}")
        else:
            missing.append(name)
    return missing


def run_preflight(temp_dir: Optional[str] = None) -> None:
    """
    Fail unless every required capability is available.

    Raises:
        MissingRequirementError: Listing all missing capabilities
    """
    missing = collect_missing(temp_dir)
    if missing:
        raise MissingRequirementError(missing)
