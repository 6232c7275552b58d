"""Recently used skills.

``record_usage`` is a pure list transformation; reading and writing the
usage file is kept separate and never raises, since recents are a
convenience and not worth interrupting the user over.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from .types import Skill, SkillUsage

logger = logging.getLogger(__name__)

MAX_RECENTS = 8


def record_usage(
    recents: list[SkillUsage],
    skill: Skill,
    *,
    now: int | None = None,
    limit: int = MAX_RECENTS,
) -> list[SkillUsage]:
    """Return a new recents list with ``skill`` moved to the front.

    The use count carries over from an existing record; the list is then
    truncated to ``limit`` entries, dropping the oldest.
    """
    if now is None:
        now = int(time.time() * 1000)

    existing = next((r for r in recents if r.name == skill.name), None)
    count = (existing.count if existing else 0) + 1

    updated = [SkillUsage(skill.name, skill.namespace, now, count)]
    updated.extend(r for r in recents if r.name != skill.name)
    return updated[:limit]


def load_usage(path: Path) -> list[SkillUsage]:
    """Load recents from disk. Missing or corrupt files give an empty list."""
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug(f"Could not read usage file {path}: {e}")
        return []

    raw = data.get("recents") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        return []

    recents: list[SkillUsage] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            recents.append(SkillUsage.from_dict(entry))
        except ValueError as e:
            logger.debug(f"Skipping usage record: {e}")
    return recents


def save_usage(path: Path, recents: list[SkillUsage]) -> bool:
    """Write recents to disk (mode 0600).

    Returns:
        True if the file was written. Failures are logged and ignored.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"recents": [r.to_dict() for r in recents]}
        path.write_text(json.dumps(payload, indent=2))
        path.chmod(0o600)
    except OSError as e:
        logger.debug(f"Could not save usage file {path}: {e}")
        return False
    return True
