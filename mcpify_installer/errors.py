"""
Installer exception hierarchy.

Every fatal condition of an installation run is an InstallerError
subclass. The CLI turns any of them into an error message and a
non-zero exit status; nothing is retried.
"""

from typing import List, Optional


class InstallerError(Exception):
    """Base exception for installation failures."""

    pass


# ============================================================================
# Environment Errors
# ============================================================================


class MissingRequirementError(InstallerError):
    """Raised when a capability the installer needs is unavailable."""

    def __init__(self, missing: List[str]):
        super().__init__("Missing required capabilities: " + ", ".join(missing))
        self.missing = missing


class UnsupportedPlatformError(InstallerError):
    """Raised when the OS family or CPU architecture has no release artifact."""

    pass


# ============================================================================
# Network Errors
# ============================================================================


class DownloadError(InstallerError):
    """Raised when a download or API query fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(DownloadError):
    """Raised when the GitHub API reports an exhausted rate limit."""

    pass


# ============================================================================
# Validation Errors
# ============================================================================


class InvalidReleaseTagError(InstallerError):
    """Raised when a release tag contains disallowed characters."""

    pass


class ReleaseResolutionError(InstallerError):
    """Raised when the latest release tag cannot be determined."""

    pass


class ChecksumNotFoundError(InstallerError):
    """Raised when the manifest has no entry for the artifact."""

    pass


# ============================================================================
# Integrity Errors
# ============================================================================


class ChecksumMismatchError(InstallerError):
    """Raised when a downloaded file does not match its expected digest."""

    def __init__(self, filename: str, expected: str, actual: str):
        super().__init__(
            f"Checksum mismatch for {filename}: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual


# ============================================================================
# Permission Errors
# ============================================================================


class InstallPermissionError(InstallerError):
    """Raised when no install directory can be created or written."""

    pass
