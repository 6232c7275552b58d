"""Skill palette host.

Owns everything that outlives a single palette session: the queued skill,
the recents list and its persistence, and the catalog loader. Exactly one
palette is open at a time per host.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from rich.console import Console

from . import config
from .component import KeyReader, PaletteComponent
from .skill_loader import get_skill_content, load_skills
from .theme import Theme
from .types import Cancel, PaletteAction, Select, Skill, SkillUsage, Unqueue
from .usage import load_usage, record_usage, save_usage

logger = logging.getLogger(__name__)

MAX_COMPLETIONS = 20


def format_skill_message(skill: Skill, content: str) -> str:
    """Wrap skill instructions for injection alongside the next message."""
    return f'<skill name="{skill.ref}">\n{content}\n</skill>'


def get_argument_completions(skills: list[Skill], prefix: str) -> list[dict[str, str]]:
    """Completions for a ``namespace:skill`` argument.

    Without a colon, matching namespaces are offered first (``ns:``); then
    every skill whose namespace and name start with the typed parts.

    Returns:
        Up to MAX_COMPLETIONS dicts with ``value`` and ``label`` keys.
    """
    prefix = prefix.strip().lower()
    namespaces = sorted({s.namespace for s in skills})
    items: list[dict[str, str]] = []

    if ":" not in prefix:
        for ns in namespaces:
            if not prefix or ns.lower().startswith(prefix):
                count = sum(1 for s in skills if s.namespace == ns)
                items.append({"value": f"{ns}:", "label": f"{ns}: ({count} skills)"})

    ns_prefix, sep, name_prefix = prefix.partition(":")
    if not sep:
        ns_prefix, name_prefix = "", prefix

    for skill in skills:
        if ns_prefix and not skill.namespace.lower().startswith(ns_prefix):
            continue
        if name_prefix and not skill.name.lower().startswith(name_prefix):
            continue
        items.append({"value": skill.ref, "label": skill.ref})

    return items[:MAX_COMPLETIONS]


class SkillPalette:
    """Queue, recents and palette lifecycle for one terminal host.

    Args:
        cfg: Loaded config (defaults to the global config).
        console: Rich console to draw on.
        skill_loader: Returns the current catalog.
        read_key: Blocking key source for the palette (defaults to the
            terminal). One reader serves every session of this host.
    """

    def __init__(
        self,
        cfg: dict[str, Any] | None = None,
        console: Console | None = None,
        skill_loader: Callable[[], list[Skill]] | None = None,
        read_key: Callable[[], str] | None = None,
    ):
        self.cfg = cfg if cfg is not None else config.load_config()
        self.console = console or Console(highlight=False)
        self._load_skills = skill_loader or (lambda: load_skills(config.get_skill_dirs(self.cfg)))
        self.usage_path: Path = config.get_usage_path(self.cfg)
        self.queued: Skill | None = None
        self.recents: list[SkillUsage] = load_usage(self.usage_path)
        self.keys = KeyReader(read_key)

    def load_skills(self) -> list[Skill]:
        """Current catalog; an unreadable catalog is an empty one."""
        try:
            return self._load_skills()
        except OSError as e:
            logger.warning(f"Could not load skills: {e}")
            return []

    def resolve(self, ref: str, skills: list[Skill] | None = None) -> Skill | None:
        """Find a skill by ``namespace:name`` or bare name."""
        ref = ref.strip()
        if not ref:
            return None
        if skills is None:
            skills = self.load_skills()
        for skill in skills:
            if skill.ref == ref or skill.name == ref:
                return skill
        return None

    def queue_skill(self, skill: Skill) -> None:
        """Queue a skill for the next message and record the use."""
        self.queued = skill
        self.recents = record_usage(
            self.recents, skill, limit=config.get_max_recents(self.cfg)
        )
        save_usage(self.usage_path, self.recents)
        logger.debug(f"Queued skill {skill.ref}")

    def unqueue(self) -> None:
        self.queued = None

    def apply_action(self, action: PaletteAction) -> None:
        """Apply the outcome of a palette session."""
        if isinstance(action, Select):
            self.queue_skill(action.skill)
        elif isinstance(action, Unqueue):
            self.unqueue()
        elif isinstance(action, Cancel):
            pass
        else:
            raise TypeError(f"Unknown palette action: {action!r}")

    def create_component(
        self, skills: list[Skill], done: Callable[[PaletteAction], None]
    ) -> PaletteComponent:
        return PaletteComponent(
            skills,
            self.queued.name if self.queued else None,
            self.recents,
            done,
            theme=Theme.from_config(self.cfg),
            inactivity_timeout=config.get_inactivity_timeout(self.cfg),
        )

    def open_palette(self) -> PaletteAction | None:
        """Open the palette and apply its result.

        Returns:
            The terminal action, or None when there are no skills to show.
        """
        skills = self.load_skills()
        if not skills:
            return None

        component = self.create_component(skills, self.apply_action)
        return component.run(self.console, self.keys)

    def close(self) -> None:
        """Stop the key reader; call once the host is done with the palette."""
        self.keys.close()

    def consume_queued(self) -> str | None:
        """Pop the queued skill as an injection message.

        Returns:
            The wrapped skill content, or None if nothing is queued or the
            skill file can no longer be read.
        """
        skill = self.queued
        if skill is None:
            return None
        self.queued = None

        try:
            content = get_skill_content(skill)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to load skill {skill.name}: {e}")
            return None
        return format_skill_message(skill, content)
