"""Pytest fixtures for skill-palette tests."""

from pathlib import Path

import pytest

from skill_palette import config
from skill_palette.types import Skill, SkillSource


def make_skill(name: str, namespace: str = "other", source: SkillSource = SkillSource.HOME) -> Skill:
    return Skill(
        name=name,
        namespace=namespace,
        description=f"Desc for {name}",
        file_path=Path(f"/fake/{name}/SKILL.md"),
        source=source,
    )


@pytest.fixture
def skills():
    """Small catalog spanning three namespaces."""
    return [
        make_skill("fizzy-cli", "tools"),
        make_skill("brave-search", "search"),
        make_skill("ad-creative", "marketing"),
    ]


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point the config layer at a temporary directory."""
    cfg_dir = tmp_path / "skill-palette"
    cfg_dir.mkdir()
    monkeypatch.setattr(config, "get_config_dir", lambda: cfg_dir)
    return cfg_dir


@pytest.fixture
def write_skill():
    """Create ``<parent>/<dir_name>/SKILL.md`` with a frontmatter header."""

    def _write(parent: Path, dir_name: str, description: str = "Does things", name: str | None = None, body: str = "Body.\n"):
        skill_dir = parent / dir_name
        skill_dir.mkdir(parents=True, exist_ok=True)
        header = ["---"]
        if name is not None:
            header.append(f"name: {name}")
        if description:
            header.append(f"description: {description}")
        header.append("---")
        skill_file = skill_dir / "SKILL.md"
        skill_file.write_text("\n".join(header) + "\n" + body)
        return skill_file

    return _write
