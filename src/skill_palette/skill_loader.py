"""Skill discovery.

Scans the configured skill directories for ``<skill>/SKILL.md`` files and
builds the catalog. Skills are keyed by name and the first one seen wins, so
the scan order (home dirs before repo-local ones) decides precedence.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from . import config
from .frontmatter import parse_frontmatter, strip_frontmatter
from .types import Skill, SkillDirConfig, SkillSource

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"
FALLBACK_NAMESPACE = "other"

# Container directories that say nothing about a skill's category
_GENERIC_PARENTS = frozenset({"skills", "agent"})
_SKIPPED_DIRS = frozenset({"node_modules"})


def _is_namespace_name(name: str) -> bool:
    return bool(name) and name not in _GENERIC_PARENTS


def derive_namespace(skill_dir: Path, symlink_source: Path | None = None) -> str:
    """Derive a namespace for a skill directory.

    Strategy:
    1. If the skill dir was reached through a symlink, use the parent dir name
       of the link target (``~/src/skills/marketing/ad-creative`` -> marketing)
    2. Otherwise use the skill dir's own parent (``.../marketing/ad-creative``)
    3. Fall back to "other"
    """
    if symlink_source is not None:
        try:
            target = Path(os.readlink(symlink_source))
        except OSError:
            target = None
        if target is not None:
            if not target.is_absolute():
                target = symlink_source.parent / target
            parent_name = Path(os.path.normpath(target)).parent.name
            if _is_namespace_name(parent_name):
                return parent_name

    parent_name = skill_dir.parent.name
    if _is_namespace_name(parent_name):
        return parent_name

    return FALLBACK_NAMESPACE


def load_skill_file(
    file_path: Path,
    source: SkillSource,
    skills_by_name: dict[str, Skill],
    symlink_source: Path | None = None,
) -> Skill | None:
    """Parse one SKILL.md and add it to ``skills_by_name``.

    Returns:
        The new Skill, or None if it has no description or the name is taken.

    Raises:
        OSError, UnicodeDecodeError: If the file can't be read.
    """
    content = file_path.read_text(encoding="utf-8")
    skill_dir = file_path.parent
    frontmatter, _ = parse_frontmatter(content, skill_dir.name)

    if not frontmatter.description or frontmatter.name in skills_by_name:
        return None

    skill = Skill(
        name=frontmatter.name,
        namespace=derive_namespace(skill_dir, symlink_source),
        description=frontmatter.description,
        file_path=file_path,
        source=source,
    )
    skills_by_name[skill.name] = skill
    return skill


def scan_skill_dir(
    directory: Path,
    recursive: bool,
    source: SkillSource,
    skills_by_name: dict[str, Skill],
    visited: set[Path] | None = None,
) -> None:
    """Scan a directory for skill dirs, adding new skills to ``skills_by_name``.

    A child directory holding SKILL.md is a skill; other child directories are
    descended into when ``recursive``. Each real directory is visited once,
    which also stops symlink cycles.
    """
    if not directory.is_dir():
        return

    if visited is None:
        visited = set()
    try:
        real_dir = directory.resolve()
    except OSError:
        real_dir = directory
    if real_dir in visited:
        return
    visited.add(real_dir)

    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.debug(f"Skipping {directory}: {e}")
        return

    for entry in entries:
        if entry.name.startswith(".") or entry.name in _SKIPPED_DIRS:
            continue

        is_symlink = entry.is_symlink()
        try:
            is_dir = entry.is_dir()
        except OSError:
            continue
        if not is_dir:
            continue

        skill_file = entry / SKILL_FILE
        if skill_file.is_file():
            try:
                load_skill_file(
                    skill_file, source, skills_by_name, entry if is_symlink else None
                )
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Skipping {skill_file}: {e}")
        elif recursive:
            scan_skill_dir(entry, True, source, skills_by_name, visited)


def load_skills(dirs: list[SkillDirConfig] | None = None) -> list[Skill]:
    """Load the skill catalog.

    Args:
        dirs: Directories to scan, in precedence order. Defaults to the
            configured skill dirs.

    Returns:
        Skills in discovery order, unique by name.
    """
    if dirs is None:
        dirs = config.get_skill_dirs()

    skills_by_name: dict[str, Skill] = {}
    for dir_config in dirs:
        scan_skill_dir(dir_config.dir, dir_config.recursive, dir_config.source, skills_by_name)

    logger.debug(f"Loaded {len(skills_by_name)} skill(s) from {len(dirs)} dir(s)")
    return list(skills_by_name.values())


def get_skill_content(skill: Skill) -> str:
    """Read a skill's instructions (file body without frontmatter).

    Raises:
        OSError: If the skill file can't be read.
    """
    raw = skill.file_path.read_text(encoding="utf-8")
    return strip_frontmatter(raw)
