"""YAML configuration for skill-palette.

The global config lives at ``~/.config/skill-palette/config.yaml`` (honouring
``XDG_CONFIG_HOME``). Anything missing falls back to ``DEFAULT_CONFIG``.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml

from .types import SkillDirConfig, SkillSource

DEFAULT_CONFIG: dict[str, Any] = {
    "debug": False,
    "usage_path": "~/.pi-skill-picker/usage.json",
    "max_recents": 8,
    "inactivity_timeout": 60,
    "max_visible": 14,
    "panel_width": 76,
    # Home dirs first: dedup by name means repo-local skills can't shadow them
    "skill_dirs": [
        {"dir": "~/.codex/skills", "recursive": True, "source": "home"},
        {"dir": "~/.claude/skills", "recursive": False, "source": "home"},
        {"dir": "~/.pi/agent/skills", "recursive": True, "source": "home"},
        {"dir": "~/.pi/skills", "recursive": True, "source": "home"},
        {"dir": ".claude/skills", "recursive": False, "source": "local"},
        {"dir": ".pi/skills", "recursive": True, "source": "local"},
    ],
}


def get_config_dir() -> Path:
    """Get the skill-palette config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(xdg_config) / "skill-palette"


def get_config_path() -> Path:
    """Get the path to the global config file."""
    return get_config_dir() / "config.yaml"


def get_log_path() -> Path:
    """Get the path to the debug log file."""
    return get_config_dir() / "debug.log"


def load_config() -> dict[str, Any]:
    """Load the global config, falling back to defaults on any problem."""
    config_path = get_config_path()
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            return copy.deepcopy(DEFAULT_CONFIG)
        return {**copy.deepcopy(DEFAULT_CONFIG), **data}
    except FileNotFoundError:
        return copy.deepcopy(DEFAULT_CONFIG)
    except (yaml.YAMLError, OSError):
        return copy.deepcopy(DEFAULT_CONFIG)


def is_debug_enabled(cfg: dict[str, Any] | None = None) -> bool:
    """Check if debug mode is enabled."""
    if cfg is None:
        cfg = load_config()
    return bool(cfg.get("debug", False))


def get_usage_path(cfg: dict[str, Any] | None = None) -> Path:
    """Get the path of the usage (recents) file."""
    if cfg is None:
        cfg = load_config()
    raw = cfg.get("usage_path") or DEFAULT_CONFIG["usage_path"]
    return Path(os.path.expanduser(raw))


def _int_setting(cfg: dict[str, Any], key: str, minimum: int) -> int:
    value = cfg.get(key, DEFAULT_CONFIG[key])
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        value = DEFAULT_CONFIG[key]
    return max(minimum, int(value))


def get_max_recents(cfg: dict[str, Any]) -> int:
    return _int_setting(cfg, "max_recents", 1)


def get_max_visible(cfg: dict[str, Any]) -> int:
    return _int_setting(cfg, "max_visible", 3)


def get_panel_width(cfg: dict[str, Any]) -> int:
    return _int_setting(cfg, "panel_width", 40)


def get_inactivity_timeout(cfg: dict[str, Any]) -> float | None:
    """Seconds of inactivity before the palette closes; None when disabled."""
    value = cfg.get("inactivity_timeout", DEFAULT_CONFIG["inactivity_timeout"])
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return None
    return float(value)


def get_skill_dirs(cfg: dict[str, Any] | None = None, cwd: Path | None = None) -> list[SkillDirConfig]:
    """Resolve the configured skill directories, in scan order.

    ``~`` is expanded; relative dirs are resolved against ``cwd``. Entries
    that are not mappings with a ``dir`` are ignored.
    """
    if cfg is None:
        cfg = load_config()
    if cwd is None:
        cwd = Path.cwd()

    entries = cfg.get("skill_dirs")
    if not isinstance(entries, list):
        entries = DEFAULT_CONFIG["skill_dirs"]

    dirs: list[SkillDirConfig] = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {"dir": entry}
        if not isinstance(entry, dict) or not entry.get("dir"):
            continue
        path = Path(os.path.expanduser(str(entry["dir"])))
        if not path.is_absolute():
            path = cwd / path
        try:
            source = SkillSource(entry.get("source", "home"))
        except ValueError:
            source = SkillSource.LOCAL
        dirs.append(
            SkillDirConfig(dir=path, recursive=bool(entry.get("recursive", True)), source=source)
        )
    return dirs
