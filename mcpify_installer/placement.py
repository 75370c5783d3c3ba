"""
Install directory resolution and binary placement.

The preferred install directory is used when it can be created and
written. Otherwise the directory is created through sudo and the
placement runs elevated; without sudo the installer falls back to the
user-local bin directory.
"""

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from mcpify_installer.config import TOOL_NAME
from mcpify_installer.errors import InstallPermissionError

logger = logging.getLogger(__name__)

ESCALATION_HELPER = "sudo"
INSTALL_UTILITY = "install"
EXECUTABLE_MODE = 0o755


@dataclass(frozen=True)
class InstallLocation:
    """Resolved install directory and whether writes to it need sudo."""

    directory: Path
    elevated: bool = False

    def target(self, binary_name: str) -> Path:
        """Path of the installed binary in this directory."""
        return self.directory / binary_name


# ============================================================================
# Lookup
# ============================================================================


def find_existing_installation(name: str = TOOL_NAME) -> Optional[str]:
    """Return the path of an installed binary reachable on PATH, if any."""
    return shutil.which(name)


def find_escalation_helper() -> Optional[str]:
    """Return the path of sudo, or None if it is not installed."""
    return shutil.which(ESCALATION_HELPER)


def is_on_path(directory: Path, search_path: Iterable[str]) -> bool:
    """Check whether a directory is an entry of the search path."""
    wanted = os.path.normcase(os.path.normpath(str(directory)))
    return any(
        os.path.normcase(os.path.normpath(entry)) == wanted for entry in search_path
    )


# ============================================================================
# Command Execution
# ============================================================================


def run_command(cmd: List[str], elevated: bool = False) -> None:
    """
    Run a filesystem command, prefixed with sudo when elevated.

    stdin and stdout are inherited so that sudo can prompt for a password.

    Raises:
        InstallPermissionError: If the command fails or cannot be started
    """
    if elevated:
        cmd = [ESCALATION_HELPER] + cmd

    logger.debug(f"Running: {shlex.join(cmd)}")
    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        raise InstallPermissionError(
            f"Command failed (exit {e.returncode}): {shlex.join(cmd)}"
        )
    except OSError as e:
        raise InstallPermissionError(f"Cannot run {cmd[0]}: {e}")


# ============================================================================
# Directory Resolution
# ============================================================================


def _try_create_dir(directory: Path) -> bool:
    """Create a directory if needed and report whether it is writable."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.debug(f"Cannot create {directory}: {e}")
        return False
    return os.access(directory, os.W_OK)


def resolve_install_dir(
    preferred: Path,
    fallback: Path,
    notify: Callable[[str], None] = logger.info,
) -> InstallLocation:
    """
    Pick the directory the binary will be installed into.

    Args:
        preferred: Configured install directory
        fallback: User-local directory used when sudo is unavailable
        notify: Receives progress messages

    Returns:
        InstallLocation, elevated if the directory was created through sudo

    Raises:
        InstallPermissionError: If neither directory can be created
    """
    if _try_create_dir(preferred):
        return InstallLocation(directory=preferred)

    if find_escalation_helper():
        notify(f"Creating {preferred} requires elevated permissions")
        run_command(["mkdir", "-p", str(preferred)], elevated=True)
        return InstallLocation(directory=preferred, elevated=True)

    if not _try_create_dir(fallback):
        raise InstallPermissionError(f"Cannot create {fallback}")

    notify(f"Falling back to {fallback}")
    return InstallLocation(directory=fallback)


# ============================================================================
# Placement
# ============================================================================


def place_binary(source: Path, location: InstallLocation, binary_name: str) -> Path:
    """
    Copy a verified binary into the install location with mode 755.

    Uses the ``install`` utility when present, otherwise a copy followed
    by a mode change. Runs through sudo when the location is elevated.

    Args:
        source: Verified binary
        location: Resolved install location
        binary_name: File name of the installed binary

    Returns:
        Path of the installed binary

    Raises:
        InstallPermissionError: If the binary cannot be placed
    """
    target = location.target(binary_name)

    if shutil.which(INSTALL_UTILITY):
        run_command(
            [INSTALL_UTILITY, "-m", "755", str(source), str(target)],
            elevated=location.elevated,
        )
    elif location.elevated:
        run_command(["cp", str(source), str(target)], elevated=True)
        run_command(["chmod", "755", str(target)], elevated=True)
    else:
        try:
            shutil.copyfile(source, target)
            os.chmod(target, EXECUTABLE_MODE)
        except OSError as e:
            raise InstallPermissionError(f"Cannot install {target}: {e}")

    logger.debug(f"Placed {source} at {target}")
    return target
