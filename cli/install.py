"""
Install CLI command.

Downloads an MCPify release binary from GitHub, verifies it against the
release checksum manifest, and installs it on the executable search
path. Falls back to ~/.local/bin when the install directory is not
writable and sudo is unavailable.
"""

import logging
import tempfile
from pathlib import Path

import click

from mcpify_installer import __version__
from mcpify_installer.checksums import lookup_digest, verify_file
from mcpify_installer.config import (
    CHECKSUM_MANIFEST_NAME,
    PRODUCT_NAME,
    TOOL_NAME,
    ConfigError,
    InstallerConfig,
)
from mcpify_installer.errors import InstallerError
from mcpify_installer.logging_config import setup_logging
from mcpify_installer.placement import (
    find_existing_installation,
    is_on_path,
    place_binary,
    resolve_install_dir,
)
from mcpify_installer.platform_info import detect_platform
from mcpify_installer.preflight import run_preflight
from mcpify_installer.release_client import (
    ReleaseArtifact,
    ReleaseClient,
    resolve_release_tag,
)

logger = logging.getLogger(__name__)

FAILURE_NOTICE = "Installation failed."


# ============================================================================
# Output
# ============================================================================


def _step(message: str) -> None:
    """Print a progress line."""
    click.echo(click.style("==>", fg="blue", bold=True) + f" {message}")


def _error(message: str) -> None:
    """Print an error line to stderr."""
    click.echo(click.style("Error: ", fg="red", bold=True) + message, err=True)


# ============================================================================
# Install Logic
# ============================================================================


def _perform_install(config: InstallerConfig, force: bool = False) -> int:
    """
    Perform the installation.

    Steps:
    1. Preflight checks
    2. Return early if already installed (unless forced)
    3. Resolve and validate the release tag
    4. Detect platform and name the artifact
    5. Download checksum manifest and look up the artifact digest
    6. Download the artifact
    7. Verify the artifact checksum
    8. Resolve the install directory (sudo or ~/.local/bin fallback)
    9. Place the binary with mode 755
    10. Report the install path and warn if it is not on PATH

    Args:
        config: Installer configuration
        force: Reinstall even if mcpify is already on PATH

    Returns:
        Exit code (0 = success)

    Raises:
        InstallerError: On any fatal condition
    """
    # Step 1: Preflight
    run_preflight(config.temp_dir)

    # Step 2: Idempotency
    if not force:
        existing = find_existing_installation()
        if existing:
            _step(f"{TOOL_NAME} already installed at {existing}")
            _step("Rerun with --force to reinstall")
            return 0

    with ReleaseClient(timeout=config.timeout_seconds) as client:
        # Step 3: Release tag
        if config.wants_latest:
            _step(f"Resolving latest {PRODUCT_NAME} release")
        tag = resolve_release_tag(config, client)

        # Step 4: Platform and artifact name
        platform_key = detect_platform()
        artifact = ReleaseArtifact.for_release(tag, platform_key)
        logger.debug(f"Release {tag}, artifact {artifact.name}")

        # Downloads live in a private directory removed on every exit path
        with tempfile.TemporaryDirectory(prefix=f"{TOOL_NAME}-", dir=config.temp_dir) as tmp:
            manifest_path = Path(tmp) / CHECKSUM_MANIFEST_NAME
            artifact_path = Path(tmp) / artifact.name

            # Step 5: Checksum manifest
            _step("Downloading checksum manifest")
            client.download(artifact.manifest_url, manifest_path)
            expected = lookup_digest(
                manifest_path.read_text(encoding="utf-8", errors="replace"),
                artifact.name,
            )

            # Step 6: Artifact
            _step(f"Downloading {artifact.name} from {artifact.base_url}")
            client.download(artifact.download_url, artifact_path)

            # Step 7: Verify
            _step("Verifying checksum")
            verify_file(artifact_path, expected, label=artifact.name)

            _step(f"Installing {PRODUCT_NAME} {tag} ({platform_key})")

            # Step 8: Install directory
            location = resolve_install_dir(
                config.install_dir,
                config.fallback_install_dir,
                notify=_step,
            )

            # Step 9: Place binary
            target = place_binary(artifact_path, location, artifact.binary_name)

    # Step 10: Report
    _step(f"Installed {TOOL_NAME} to {target}")
    if not is_on_path(location.directory, config.search_path):
        _step(f"Warning: {location.directory} is not in your PATH")

    return 0


# ============================================================================
# Click Command
# ============================================================================


@click.command()
@click.version_option(version=__version__, prog_name="mcpify-install")
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Reinstall even if mcpify is already on PATH",
)
@click.pass_context
def install(ctx: click.Context, force: bool) -> None:
    """
    Install the MCPify command-line tool.

    Downloads the MCPify release binary for this platform from GitHub,
    verifies its SHA-256 checksum, and installs it to /usr/local/bin
    (using sudo if needed) or ~/.local/bin.

    \b
    Environment:
      MCPIFY_RELEASE_TAG  Release to install (default: latest)
      MCPIFY_INSTALL_DIR  Install directory (default: /usr/local/bin)
      MCPIFY_LOG_LEVEL    Log level (default: WARNING)

    Example:

        mcpify-install
        MCPIFY_RELEASE_TAG=v1.2.3 mcpify-install --force
    """
    try:
        config = InstallerConfig()
        config.validate()
        setup_logging(config.log_level)
        exit_code = _perform_install(config, force=force)
    except (ConfigError, InstallerError) as e:
        logger.debug("Installation aborted", exc_info=True)
        _error(str(e))
        click.echo(FAILURE_NOTICE, err=True)
        ctx.exit(1)
    except Exception:
        click.echo(FAILURE_NOTICE, err=True)
        raise

    ctx.exit(exit_code)
