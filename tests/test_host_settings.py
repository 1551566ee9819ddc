"""
Tests for hook registration (packageage/adapters/host_settings.py).
"""

import json

import pytest

from packageage.adapters.host_settings import (
    HOOK_COMMAND,
    install_hook,
    is_installed,
    load_host_settings,
    read_host_settings,
    uninstall_hook,
)
from packageage.core.errors import HostSettingsError


class TestReadHostSettings:
    """Tests for tolerant settings loading."""

    def test_missing_file(self, tmp_path):
        """Test a missing file reads as empty."""
        assert read_host_settings(tmp_path / "settings.json") == {}

    def test_invalid_json(self, tmp_path):
        """Test a broken file reads as empty."""
        path = tmp_path / "settings.json"
        path.write_text("{oops", encoding="utf-8")
        assert read_host_settings(path) == {}

    def test_non_object(self, tmp_path):
        """Test a JSON array reads as empty."""
        path = tmp_path / "settings.json"
        path.write_text("[]", encoding="utf-8")
        assert read_host_settings(path) == {}


class TestInstallUninstall:
    """Tests for the install/uninstall/status cycle."""

    def test_install_creates_file(self, tmp_path):
        """Test install writes a PreToolUse entry for Bash."""
        path = tmp_path / ".claude" / "settings.json"
        assert install_hook(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["hooks"]["PreToolUse"] == [
            {"matcher": "Bash", "hooks": [{"type": "command", "command": HOOK_COMMAND}]}
        ]
        assert is_installed(path)

    def test_install_is_idempotent(self, tmp_path):
        """Test a second install changes nothing."""
        path = tmp_path / "settings.json"
        assert install_hook(path)
        assert not install_hook(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert len(data["hooks"]["PreToolUse"]) == 1

    def test_preserves_other_settings(self, tmp_path):
        """Test unrelated keys and hooks survive install and uninstall."""
        path = tmp_path / "settings.json"
        other = {"matcher": "Write", "hooks": [{"type": "command", "command": "other-hook"}]}
        path.write_text(
            json.dumps({"theme": "dark", "hooks": {"PreToolUse": [other], "Stop": []}}),
            encoding="utf-8",
        )

        install_hook(path)
        assert uninstall_hook(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["theme"] == "dark"
        assert data["hooks"]["PreToolUse"] == [other]
        assert data["hooks"]["Stop"] == []

    def test_uninstall_when_absent(self, tmp_path):
        """Test uninstall reports nothing to remove."""
        path = tmp_path / "settings.json"
        assert not uninstall_hook(path)
        assert not path.exists()

    def test_status(self, tmp_path):
        """Test status follows install and uninstall."""
        path = tmp_path / "settings.json"
        assert not is_installed(path)
        install_hook(path)
        assert is_installed(path)
        uninstall_hook(path)
        assert not is_installed(path)


class TestUnreadableSettings:
    """Tests that a broken settings file is never overwritten."""

    CORRUPT = '{"permissions": {"allow": ["Bash(ls)"]}, "model": "opus",}\n'

    def test_load_raises_on_invalid_json(self, tmp_path):
        """Test strict loading refuses a file it cannot parse."""
        path = tmp_path / "settings.json"
        path.write_text(self.CORRUPT, encoding="utf-8")
        with pytest.raises(HostSettingsError):
            load_host_settings(path)

    def test_load_raises_on_non_object(self, tmp_path):
        """Test strict loading refuses a JSON array."""
        path = tmp_path / "settings.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(HostSettingsError):
            load_host_settings(path)

    def test_load_missing_file(self, tmp_path):
        """Test a missing file is still an empty starting point."""
        assert load_host_settings(tmp_path / "settings.json") == {}

    @pytest.mark.parametrize("operation", [install_hook, uninstall_hook])
    def test_file_left_untouched(self, tmp_path, operation):
        """Test install and uninstall keep a corrupt file byte for byte."""
        path = tmp_path / "settings.json"
        path.write_text(self.CORRUPT, encoding="utf-8")
        with pytest.raises(HostSettingsError):
            operation(path)
        assert path.read_text(encoding="utf-8") == self.CORRUPT
