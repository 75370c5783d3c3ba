"""
MCPify Installer - fetch and install prebuilt MCPify release binaries.

This package resolves an MCPify release, picks the artifact for the
current platform, verifies it against the release checksum manifest
and places it on the executable search path.

Key modules:
- config: Installer configuration (env vars, config file, defaults)
- preflight: Required capability checks
- platform_info: OS family / architecture detection and artifact naming
- release_client: HTTP client for GitHub release metadata and downloads
- checksums: Checksum manifest parsing and SHA-256 verification
- placement: Install directory resolution and binary placement
"""

import os
from importlib.metadata import PackageNotFoundError, version


def _get_version() -> str:
    """
    Get version with priority: MCPIFY_INSTALLER_VERSION env var > package metadata > fallback.

    Priority:
    1. MCPIFY_INSTALLER_VERSION env var - explicit runtime override
    2. Installed distribution metadata
    3. Fallback - unknown version
    """
    env_version = os.environ.get('MCPIFY_INSTALLER_VERSION')
    if env_version:
        return env_version

    try:
        return version('mcpify-installer')
    except PackageNotFoundError:
        return '0.0.0+unknown'


__version__ = _get_version()
