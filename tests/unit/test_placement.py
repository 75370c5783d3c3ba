"""
Unit tests for install directory resolution and binary placement.

Tests:
- Writable preferred directory
- sudo escalation when the preferred directory is not writable
- Fallback to ~/.local/bin without sudo
- Placement through `install`, through sudo, and by plain copy
- PATH membership checks
"""

import os
import stat
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from mcpify_installer.errors import InstallPermissionError
from mcpify_installer.placement import (
    InstallLocation,
    find_existing_installation,
    is_on_path,
    place_binary,
    resolve_install_dir,
    run_command,
)


@pytest.fixture
def blocked_dir(tmp_path: Path) -> Path:
    """A directory path that cannot be created (its parent is a file)."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return blocker / "bin"


@pytest.fixture
def verified_binary(tmp_path: Path) -> Path:
    path = tmp_path / "download" / "mcpify-linux-amd64"
    path.parent.mkdir()
    path.write_bytes(b"binary contents")
    path.chmod(0o600)
    return path


class TestResolveInstallDir:
    """Tests for resolve_install_dir."""

    def test_writable_preferred_dir_is_created(self, tmp_path):
        preferred = tmp_path / "usr" / "local" / "bin"

        location = resolve_install_dir(preferred, tmp_path / "fallback")

        assert location == InstallLocation(directory=preferred, elevated=False)
        assert preferred.is_dir()

    def test_escalates_with_sudo(self, blocked_dir, tmp_path):
        messages = []

        with patch("mcpify_installer.placement.find_escalation_helper", return_value="/usr/bin/sudo"), \
             patch("mcpify_installer.placement.run_command") as mock_run:
            location = resolve_install_dir(blocked_dir, tmp_path / "fallback", notify=messages.append)

        mock_run.assert_called_once_with(["mkdir", "-p", str(blocked_dir)], elevated=True)
        assert location == InstallLocation(directory=blocked_dir, elevated=True)
        assert messages == [f"Creating {blocked_dir} requires elevated permissions"]
        assert not (tmp_path / "fallback").exists()

    def test_falls_back_without_sudo(self, blocked_dir, isolated_env):
        fallback = isolated_env / ".local" / "bin"
        messages = []

        with patch("mcpify_installer.placement.find_escalation_helper", return_value=None):
            location = resolve_install_dir(blocked_dir, fallback, notify=messages.append)

        assert location == InstallLocation(directory=fallback, elevated=False)
        assert fallback.is_dir()
        assert messages == [f"Falling back to {fallback}"]

    def test_fallback_not_creatable(self, blocked_dir, tmp_path):
        blocked_fallback = tmp_path / "blocker" / "home-bin"

        with patch("mcpify_installer.placement.find_escalation_helper", return_value=None):
            with pytest.raises(InstallPermissionError, match="Cannot create"):
                resolve_install_dir(blocked_dir, blocked_fallback)

    def test_failed_sudo_is_fatal(self, blocked_dir, tmp_path):
        with patch("mcpify_installer.placement.find_escalation_helper", return_value="/usr/bin/sudo"), \
             patch("mcpify_installer.placement.subprocess.run",
                   side_effect=subprocess.CalledProcessError(1, ["sudo"])):
            with pytest.raises(InstallPermissionError, match="exit 1"):
                resolve_install_dir(blocked_dir, tmp_path / "fallback")


class TestRunCommand:
    """Tests for run_command."""

    def test_plain_command(self):
        with patch("mcpify_installer.placement.subprocess.run") as mock_run:
            run_command(["mkdir", "-p", "/opt/bin"])

        mock_run.assert_called_once_with(["mkdir", "-p", "/opt/bin"], check=True)

    def test_elevated_command(self):
        with patch("mcpify_installer.placement.subprocess.run") as mock_run:
            run_command(["mkdir", "-p", "/opt/bin"], elevated=True)

        mock_run.assert_called_once_with(["sudo", "mkdir", "-p", "/opt/bin"], check=True)

    def test_missing_executable(self):
        with patch("mcpify_installer.placement.subprocess.run", side_effect=FileNotFoundError("sudo")):
            with pytest.raises(InstallPermissionError, match="Cannot run sudo"):
                run_command(["true"], elevated=True)


class TestPlaceBinary:
    """Tests for place_binary."""

    def test_copy_and_chmod_without_install_utility(self, verified_binary, tmp_path):
        location = InstallLocation(directory=tmp_path / "bin")
        location.directory.mkdir()

        with patch("mcpify_installer.placement.shutil.which", return_value=None):
            target = place_binary(verified_binary, location, "mcpify")

        assert target == tmp_path / "bin" / "mcpify"
        assert target.read_bytes() == b"binary contents"
        assert stat.S_IMODE(target.stat().st_mode) == 0o755

    def test_uses_install_utility(self, verified_binary, tmp_path):
        location = InstallLocation(directory=tmp_path / "bin")

        with patch("mcpify_installer.placement.shutil.which", return_value="/usr/bin/install"), \
             patch("mcpify_installer.placement.run_command") as mock_run:
            target = place_binary(verified_binary, location, "mcpify")

        mock_run.assert_called_once_with(
            ["install", "-m", "755", str(verified_binary), str(target)],
            elevated=False,
        )

    def test_elevated_install_utility(self, verified_binary):
        location = InstallLocation(directory=Path("/usr/local/bin"), elevated=True)

        with patch("mcpify_installer.placement.shutil.which", return_value="/usr/bin/install"), \
             patch("mcpify_installer.placement.run_command") as mock_run:
            target = place_binary(verified_binary, location, "mcpify")

        assert target == Path("/usr/local/bin/mcpify")
        mock_run.assert_called_once_with(
            ["install", "-m", "755", str(verified_binary), "/usr/local/bin/mcpify"],
            elevated=True,
        )

    def test_elevated_copy_without_install_utility(self, verified_binary):
        location = InstallLocation(directory=Path("/usr/local/bin"), elevated=True)

        with patch("mcpify_installer.placement.shutil.which", return_value=None), \
             patch("mcpify_installer.placement.run_command") as mock_run:
            place_binary(verified_binary, location, "mcpify")

        assert [c.args[0] for c in mock_run.call_args_list] == [
            ["cp", str(verified_binary), "/usr/local/bin/mcpify"],
            ["chmod", "755", "/usr/local/bin/mcpify"],
        ]
        assert all(c.kwargs == {"elevated": True} for c in mock_run.call_args_list)

    def test_copy_failure(self, verified_binary, tmp_path):
        location = InstallLocation(directory=tmp_path / "missing")

        with patch("mcpify_installer.placement.shutil.which", return_value=None):
            with pytest.raises(InstallPermissionError, match="Cannot install"):
                place_binary(verified_binary, location, "mcpify")


class TestPathHelpers:
    """Tests for PATH lookups."""

    def test_is_on_path(self, tmp_path):
        assert is_on_path(tmp_path / "bin", ["/usr/bin", str(tmp_path / "bin")])
        assert is_on_path(tmp_path / "bin", [str(tmp_path / "bin") + os.sep])
        assert not is_on_path(tmp_path / "bin", ["/usr/bin"])
        assert not is_on_path(tmp_path / "bin", [])

    def test_find_existing_installation(self, tmp_path, monkeypatch):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        tool = bin_dir / "mcpify"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)
        monkeypatch.setenv("PATH", str(bin_dir))

        assert find_existing_installation() == str(tool)

    def test_find_existing_installation_absent(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PATH", str(tmp_path))

        assert find_existing_installation() is None
