"""
Pytest configuration and fixtures for MCPify installer tests.

Provides an isolated environment (HOME, TMPDIR, PATH, config file),
sample release data, and a factory for release clients backed by an
in-memory HTTP transport.
"""

import hashlib
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import httpx
import pytest

from mcpify_installer.config import LATEST_RELEASE_API_URL, RELEASE_DOWNLOAD_URL


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch) -> Path:
    """
    Isolate every test from the real user environment.

    Returns:
        Path to the fake home directory
    """
    home = tmp_path / "home"
    home.mkdir()
    tmpdir = tmp_path / "tmp"
    tmpdir.mkdir()

    for name in (
        "MCPIFY_RELEASE_TAG",
        "MCPIFY_INSTALL_DIR",
        "MCPIFY_LOG_LEVEL",
        "MCPIFY_INSTALLER_VERSION",
    ):
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("TMPDIR", str(tmpdir))
    monkeypatch.setenv("MCPIFY_INSTALLER_CONFIG", str(tmp_path / "missing-config.yaml"))
    return home


@pytest.fixture
def temp_download_dir(tmp_path: Path) -> Path:
    """The TMPDIR used by the installer in tests."""
    return tmp_path / "tmp"


# ============================================================================
# Release Data Fixtures
# ============================================================================


@pytest.fixture
def artifact_bytes() -> bytes:
    """Fake binary contents of a release artifact."""
    return b"\x7fELF fake mcpify binary" * 64


@pytest.fixture
def artifact_digest(artifact_bytes: bytes) -> str:
    """SHA-256 of the fake artifact."""
    return hashlib.sha256(artifact_bytes).hexdigest()


@pytest.fixture
def release_base_url() -> str:
    """Download base URL for release 1.2.3."""
    return f"{RELEASE_DOWNLOAD_URL}/1.2.3"


@pytest.fixture
def linux_release_routes(
    release_base_url: str, artifact_bytes: bytes, artifact_digest: str
) -> Dict[str, Tuple[int, bytes]]:
    """URL -> (status, body) map serving a valid linux/amd64 release."""
    manifest = (
        f"{'0' * 64}  mcpify-macos-arm64\n"
        f"{artifact_digest}  mcpify-linux-amd64\n"
        f"{'f' * 64}  mcpify-win-amd64.exe\n"
    )
    return {
        f"{release_base_url}/checksums.txt": (200, manifest.encode()),
        f"{release_base_url}/mcpify-linux-amd64": (200, artifact_bytes),
    }


@pytest.fixture
def latest_release_route() -> Dict[str, Tuple[int, bytes]]:
    """Latest-release API response pointing at 1.2.3."""
    return {LATEST_RELEASE_API_URL: (200, b'{"tag_name": "1.2.3", "name": "MCPify 1.2.3"}')}


# ============================================================================
# HTTP Fixtures
# ============================================================================


@pytest.fixture
def requested_urls() -> List[str]:
    """URLs requested through mock transports, in order."""
    return []


@pytest.fixture
def mock_transport(requested_urls: List[str]) -> Callable[[Dict[str, Tuple[int, bytes]]], httpx.MockTransport]:
    """
    Build an httpx transport serving a fixed URL map.

    Unknown URLs get a 404. Every requested URL is appended to
    requested_urls.
    """

    def build(routes: Dict[str, Tuple[int, bytes]]) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            requested_urls.append(url)
            if url not in routes:
                return httpx.Response(404, content=b"Not Found")
            status, body = routes[url]
            return httpx.Response(status, content=body)

        return httpx.MockTransport(handler)

    return build


@pytest.fixture
def client_factory(mock_transport):
    """
    Build a ReleaseClient factory usable in place of the ReleaseClient class.

    Usage:
        patch("cli.install.ReleaseClient", client_factory(routes))
    """
    from mcpify_installer.release_client import ReleaseClient

    def build(routes: Dict[str, Tuple[int, bytes]]):
        transport = mock_transport(routes)

        def factory(timeout: float = 30):
            return ReleaseClient(timeout=timeout, transport=transport)

        return factory

    return build
