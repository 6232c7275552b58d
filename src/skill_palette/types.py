"""Type definitions for skill-palette.

Shared dataclasses and enums used by the matching engine, the palette state
machine and the collaborators around them. Display items and palette actions
are small tagged variants; consumers dispatch with isinstance().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union


class SkillSource(str, Enum):
    """Where a skill was discovered.

    HOME skills come from the user's own (trusted) directories and are scanned
    first, so a repo-local skill can never shadow one of them.
    """

    HOME = "home"
    LOCAL = "local"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Skill:
    """A selectable skill. ``name`` is unique across a catalog."""

    name: str
    namespace: str
    description: str
    file_path: Path = field(default=Path(), compare=False)
    source: SkillSource = SkillSource.HOME

    @property
    def ref(self) -> str:
        """Fully qualified reference, e.g. ``marketing:ad-creative``."""
        return f"{self.namespace}:{self.name}"


@dataclass(frozen=True)
class SkillDirConfig:
    """A directory to scan for skills."""

    dir: Path
    recursive: bool
    source: SkillSource


@dataclass
class SkillUsage:
    """Usage record for a skill that has been chosen at least once."""

    name: str
    namespace: str
    timestamp: int
    count: int = 1

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "timestamp": self.timestamp,
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SkillUsage":
        """Build a record from its JSON form.

        Raises:
            ValueError: If required fields are missing or have the wrong type.
        """
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"Invalid usage record name: {name!r}")
        namespace = data.get("namespace", "")
        if not isinstance(namespace, str):
            raise ValueError(f"Invalid usage record namespace: {namespace!r}")
        timestamp = data.get("timestamp", 0)
        count = data.get("count", 1)
        if not isinstance(timestamp, (int, float)) or not isinstance(count, int):
            raise ValueError(f"Invalid usage record for {name}")
        return cls(name=name, namespace=namespace, timestamp=int(timestamp), count=max(1, count))


# ── Display list ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Header:
    """Non-selectable group heading (a namespace, or ``recent``)."""

    namespace: str


@dataclass(frozen=True)
class Entry:
    """Selectable row. ``namespace`` is the group label it is shown under."""

    skill: Skill
    namespace: str


DisplayItem = Union[Header, Entry]


# ── Palette actions ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Select:
    skill: Skill


@dataclass(frozen=True)
class Unqueue:
    skill: Skill


@dataclass(frozen=True)
class Cancel:
    pass


PaletteAction = Union[Select, Unqueue, Cancel]
