"""Hook registration in the host settings file.

The host reads `hooks.PreToolUse` from a JSON settings file; each entry has a
tool `matcher` and a list of commands. We add, remove or detect the entry
whose command mentions `HOOK_NAME`, leaving everything else untouched.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from packageage.core.errors import HostSettingsError

HOOK_NAME = "packageage"
HOOK_COMMAND = "packageage"
HOOK_EVENT = "PreToolUse"
HOOK_MATCHER = "Bash"


def read_host_settings(path: Path) -> dict[str, Any]:
    """Load the settings JSON for read-only checks.

    A missing or unreadable file counts as empty.
    """

    try:
        return load_host_settings(path)
    except HostSettingsError:
        return {}


def load_host_settings(path: Path) -> dict[str, Any]:
    """Load the settings JSON for an update.

    A missing file counts as empty. An existing file that cannot be read or
    is not a JSON object raises `HostSettingsError`, so it is never overwritten.
    """

    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise HostSettingsError(path, f"cannot read settings: {exc}") from exc
    if not isinstance(data, dict):
        raise HostSettingsError(path, "settings are not a JSON object")
    return data


def write_host_settings(path: Path, settings: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2) + "\n", encoding="utf-8")
    return path


def _entry_is_ours(entry: object) -> bool:
    if not isinstance(entry, dict):
        return False
    hooks = entry.get("hooks")
    if not isinstance(hooks, list):
        return False
    return any(
        isinstance(hook, dict) and HOOK_NAME in str(hook.get("command", ""))
        for hook in hooks
    )


def _entries(settings: dict[str, Any]) -> list[Any]:
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        return []
    entries = hooks.get(HOOK_EVENT)
    return entries if isinstance(entries, list) else []


def is_installed(path: Path) -> bool:
    return any(_entry_is_ours(entry) for entry in _entries(read_host_settings(path)))


def install_hook(path: Path, *, command: str = HOOK_COMMAND) -> bool:
    """Register the hook. Returns False when it was already registered."""

    settings = load_host_settings(path)
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        hooks = {}
        settings["hooks"] = hooks
    entries = hooks.get(HOOK_EVENT)
    if not isinstance(entries, list):
        entries = []
        hooks[HOOK_EVENT] = entries

    if any(_entry_is_ours(entry) for entry in entries):
        return False

    entries.append(
        {
            "matcher": HOOK_MATCHER,
            "hooks": [{"type": "command", "command": command}],
        }
    )
    write_host_settings(path, settings)
    return True


def uninstall_hook(path: Path) -> bool:
    """Remove the hook. Returns False when it was not registered."""

    settings = load_host_settings(path)
    entries = _entries(settings)
    kept = [entry for entry in entries if not _entry_is_ours(entry)]
    if len(kept) == len(entries):
        return False

    settings["hooks"][HOOK_EVENT] = kept
    write_host_settings(path, settings)
    return True
