"""
Installer configuration module.

Holds the installer constants (tool name, release locations, defaults)
and the InstallerConfig class. Configuration comes from environment
variables, an optional YAML file, and built-in defaults.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Optional

import yaml
from platformdirs import user_config_dir

from mcpify_installer.errors import InvalidReleaseTagError

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

APP_NAME = "mcpify"
CONFIG_FILENAME = "installer-config.yaml"

TOOL_NAME = "mcpify"
PRODUCT_NAME = "MCPify"
GITHUB_REPO = "kiliannnnn/MCPify"
LATEST_RELEASE_API_URL = f"https://api.github.com/repos/{GITHUB_REPO}/releases/latest"
RELEASE_DOWNLOAD_URL = f"https://github.com/{GITHUB_REPO}/releases/download"
CHECKSUM_MANIFEST_NAME = "checksums.txt"

# Environment variable names
ENV_RELEASE_TAG = "MCPIFY_RELEASE_TAG"
ENV_INSTALL_DIR = "MCPIFY_INSTALL_DIR"
ENV_LOG_LEVEL = "MCPIFY_LOG_LEVEL"
ENV_CONFIG_PATH = "MCPIFY_INSTALLER_CONFIG"

# Default values
LATEST_TAG = "latest"
DEFAULT_INSTALL_DIR = "/usr/local/bin"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_TIMEOUT = 30  # seconds

# Release tags end up in URLs and file names
RELEASE_TAG_PATTERN = re.compile(r"[A-Za-z0-9._-]+")

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ============================================================================
# Exceptions
# ============================================================================


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    pass


# ============================================================================
# Helper Functions
# ============================================================================


def get_default_config_dir() -> Path:
    """
    Get the default configuration directory for the current platform.

    Returns:
        Path to the platform-appropriate config directory
    """
    return Path(user_config_dir(APP_NAME, appauthor=False))


def validate_release_tag(tag: str) -> str:
    """
    Check a release tag against the allowed character set.

    Args:
        tag: Release tag to validate

    Returns:
        The tag, unchanged

    Raises:
        InvalidReleaseTagError: If the tag is empty or has other characters
            than letters, digits, '.', '_' and '-'
    """
    if not tag or not RELEASE_TAG_PATTERN.fullmatch(tag):
        raise InvalidReleaseTagError(f"Invalid release tag: {tag}")
    return tag


# ============================================================================
# InstallerConfig Class
# ============================================================================


class InstallerConfig:
    """
    Installer configuration.

    Configuration sources (in priority order):
    1. Environment variables
    2. Configuration file
    3. Default values

    Attributes:
        release_tag: Release to install, or "latest"
        install_dir: Preferred install directory
        fallback_install_dir: User-local directory used without escalation
        temp_dir: Directory for temporary downloads (None = system default)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        timeout_seconds: HTTP timeout
        search_path: Entries of the executable search path
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize installer configuration.

        Args:
            config_path: Explicit path to config file (takes precedence)
        """
        if config_path:
            self._config_path = Path(config_path)
        else:
            env_path = os.environ.get(ENV_CONFIG_PATH)
            if env_path:
                self._config_path = Path(env_path)
            else:
                self._config_path = get_default_config_dir() / CONFIG_FILENAME

        # Initialize with defaults
        self._release_tag: str = LATEST_TAG
        self._install_dir: str = DEFAULT_INSTALL_DIR
        self._log_level: str = DEFAULT_LOG_LEVEL
        self._timeout_seconds: int = DEFAULT_TIMEOUT

        self._load()

    @property
    def config_path(self) -> Path:
        """Get the configuration file path."""
        return self._config_path

    # -------------------------------------------------------------------------
    # Configuration Properties
    # -------------------------------------------------------------------------

    @property
    def release_tag(self) -> str:
        """Get the requested release tag."""
        return os.environ.get(ENV_RELEASE_TAG) or self._release_tag

    @property
    def install_dir(self) -> Path:
        """Get the preferred install directory."""
        value = os.environ.get(ENV_INSTALL_DIR) or self._install_dir
        return Path(value).expanduser()

    @property
    def fallback_install_dir(self) -> Path:
        """Get the user-local install directory."""
        home = os.environ.get("HOME") or str(Path.home())
        return Path(home) / ".local" / "bin"

    @property
    def temp_dir(self) -> Optional[str]:
        """Get the directory for temporary files, if overridden."""
        return os.environ.get("TMPDIR") or None

    @property
    def log_level(self) -> str:
        """Get the log level."""
        return os.environ.get(ENV_LOG_LEVEL, self._log_level)

    @property
    def timeout_seconds(self) -> int:
        """Get the HTTP timeout in seconds."""
        return self._timeout_seconds

    @property
    def search_path(self) -> List[str]:
        """Get the entries of the PATH environment variable."""
        return [p for p in os.environ.get("PATH", "").split(os.pathsep) if p]

    @property
    def wants_latest(self) -> bool:
        """Check if the latest release has to be resolved."""
        return self.release_tag == LATEST_TAG

    # -------------------------------------------------------------------------
    # Configuration Management
    # -------------------------------------------------------------------------

    def _load(self) -> None:
        """Load configuration from file."""
        if not self._config_path.exists():
            return

        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {self._config_path}")

        # Keys present without a value keep their defaults
        if data.get("release_tag") is not None:
            self._release_tag = str(data["release_tag"])
        if data.get("install_dir") is not None:
            self._install_dir = str(data["install_dir"])
        if data.get("log_level") is not None:
            self._log_level = data["log_level"]
        if data.get("timeout_seconds") is not None:
            self._timeout_seconds = data["timeout_seconds"]
        logger.debug(f"Loaded config from {self._config_path}")

    def validate(self) -> None:
        """
        Validate the current configuration.

        The release tag is not checked here; it is validated once it has
        been resolved.

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        if not isinstance(self.timeout_seconds, int) or self.timeout_seconds <= 0:
            raise ConfigValidationError(
                f"timeout_seconds must be a positive integer, got: {self.timeout_seconds}"
            )

        if str(self.log_level).upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(f"Invalid log_level: {self.log_level}")
