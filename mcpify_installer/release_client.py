"""
Release client for GitHub release metadata and downloads.

Queries the latest-release endpoint and streams release assets
(checksum manifest and binaries) to local files.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from mcpify_installer import __version__
from mcpify_installer.config import (
    CHECKSUM_MANIFEST_NAME,
    DEFAULT_TIMEOUT,
    LATEST_RELEASE_API_URL,
    RELEASE_DOWNLOAD_URL,
    TOOL_NAME,
    InstallerConfig,
    validate_release_tag,
)
from mcpify_installer.errors import DownloadError, RateLimitError, ReleaseResolutionError
from mcpify_installer.platform_info import PlatformKey, artifact_name, executable_name

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

USER_AGENT = f"MCPify-Installer/{__version__}"
RATE_LIMIT_MARKER = "API rate limit exceeded"


# ============================================================================
# Release Artifact
# ============================================================================


@dataclass(frozen=True)
class ReleaseArtifact:
    """A platform artifact of one release and the URLs it is served from."""

    tag: str
    platform: PlatformKey
    base_url: str

    @classmethod
    def for_release(cls, tag: str, platform: PlatformKey) -> "ReleaseArtifact":
        return cls(tag=tag, platform=platform, base_url=f"{RELEASE_DOWNLOAD_URL}/{tag}")

    @property
    def name(self) -> str:
        """Artifact file name, e.g. mcpify-linux-amd64."""
        return artifact_name(self.platform)

    @property
    def binary_name(self) -> str:
        """File name of the installed binary."""
        return executable_name(TOOL_NAME, self.platform)

    @property
    def manifest_url(self) -> str:
        return f"{self.base_url}/{CHECKSUM_MANIFEST_NAME}"

    @property
    def download_url(self) -> str:
        return f"{self.base_url}/{self.name}"


# ============================================================================
# ReleaseClient Class
# ============================================================================


class ReleaseClient:
    """
    HTTP client for MCPify releases.

    Attributes:
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the release client.

        Args:
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._timeout = timeout
        self._client = httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def timeout(self) -> float:
        return self._timeout

    # -------------------------------------------------------------------------
    # Release Metadata
    # -------------------------------------------------------------------------

    def get_latest_tag(self) -> str:
        """
        Get the tag name of the latest published release.

        Returns:
            Tag name as reported by GitHub (not yet validated)

        Raises:
            RateLimitError: If the API rate limit is exhausted
            ReleaseResolutionError: If the response carries no tag
            DownloadError: If the request fails
        """
        try:
            response = self._client.get(
                LATEST_RELEASE_API_URL,
                headers={"Accept": "application/vnd.github+json"},
            )
        except httpx.RequestError as e:
            raise DownloadError(f"Failed to query {LATEST_RELEASE_API_URL}: {e}")

        if RATE_LIMIT_MARKER in response.text:
            raise RateLimitError(
                "GitHub API rate limit exceeded. Set MCPIFY_RELEASE_TAG explicitly.",
                status_code=response.status_code,
            )

        if not response.is_success:
            raise DownloadError(
                f"Failed to query {LATEST_RELEASE_API_URL}: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not tag or not isinstance(tag, str):
            raise ReleaseResolutionError("Unable to determine the latest release tag")

        logger.debug(f"Latest release tag: {tag}")
        return tag

    # -------------------------------------------------------------------------
    # Downloads
    # -------------------------------------------------------------------------

    def download(self, url: str, dest_path: Path) -> int:
        """
        Stream a URL into a local file.

        Args:
            url: URL to download
            dest_path: Destination file (overwritten)

        Returns:
            Number of bytes written

        Raises:
            DownloadError: On connection errors or non-2xx responses
        """
        written = 0
        try:
            with self._client.stream("GET", url) as response:
                if not response.is_success:
                    raise DownloadError(
                        f"Failed to download {url}: HTTP {response.status_code}",
                        status_code=response.status_code,
                    )
                with open(dest_path, "wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
                        written += len(chunk)
        except httpx.RequestError as e:
            raise DownloadError(f"Failed to download {url}: {e}")
        except OSError as e:
            raise DownloadError(f"Failed to write {dest_path}: {e}")

        logger.debug(f"Downloaded {url} ({written} bytes) to {dest_path}")
        return written

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "ReleaseClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# ============================================================================
# Tag Resolution
# ============================================================================


def resolve_release_tag(config: InstallerConfig, client: ReleaseClient) -> str:
    """
    Resolve the release tag to install.

    Queries GitHub only when the configured tag is "latest". The result is
    validated before it is used in any URL.

    Args:
        config: Installer configuration
        client: Release client for the latest-release query

    Returns:
        Validated release tag

    Raises:
        InvalidReleaseTagError: If the tag has disallowed characters
        RateLimitError, ReleaseResolutionError, DownloadError: If the
            latest release cannot be queried
    """
    tag = config.release_tag
    if config.wants_latest:
        tag = client.get_latest_tag()
    return validate_release_tag(tag)
