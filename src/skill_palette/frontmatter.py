"""Frontmatter parsing for SKILL.md files.

Parses the header of a skill file:
---
name: ad-creative
description: Write ad copy for paid social campaigns
---

Keys are read line by line (``key: rest of line``) and plain values are kept
verbatim, so unquoted descriptions with colons, ``#`` or words like ``yes``
come through as written. Quoted values and block scalars (``>``, ``|``) are
decoded with YAML.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import yaml

# Frontmatter regex: matches --- at start, content, ---
FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n?---\s*(?:\n|$)", re.DOTALL)

# Top-level "key: value" line
KEY_RE = re.compile(r"^([A-Za-z0-9_-]+)\s*:(.*)$")

BLOCK_INDICATORS = (">", "|")
QUOTES = ('"', "'")


@dataclass
class SkillFrontmatter:
    """Parsed frontmatter of a skill file."""

    name: str
    description: str


def _needs_yaml(value: str) -> bool:
    return value.startswith(QUOTES) or value.startswith(BLOCK_INDICATORS)


def _decode(key: str, value: str, continuation: list[str]) -> str:
    """Decode a quoted or block value; the raw text if YAML rejects it."""
    chunk = "\n".join([f"{key}: {value}", *continuation])
    try:
        data = yaml.safe_load(chunk)
    except yaml.YAMLError:
        return value
    decoded = data.get(key) if isinstance(data, dict) else None
    if not isinstance(decoded, str):
        return value
    return decoded.strip()


def _scan_header(header: str) -> dict[str, str]:
    """Read top-level ``key: value`` pairs; the last occurrence of a key wins."""
    data: dict[str, str] = {}
    lines = header.splitlines()
    for i, line in enumerate(lines):
        match = KEY_RE.match(line)
        if not match:
            continue
        key, value = match.group(1), match.group(2).strip()
        if _needs_yaml(value):
            continuation = []
            for next_line in lines[i + 1 :]:
                if next_line and not next_line[0].isspace():
                    break
                continuation.append(next_line)
            value = _decode(key, value, continuation)
        data[key] = value
    return data


def parse_frontmatter(content: str, fallback_name: str) -> tuple[SkillFrontmatter, str]:
    """Parse frontmatter from skill file content.

    Args:
        content: Full file content with potential frontmatter.
        fallback_name: Name to use when the header does not set one
            (normally the skill directory name).

    Returns:
        Tuple of (frontmatter, body). Without a header the description
        is empty and the body is the whole content.
    """
    match = FRONTMATTER_RE.match(content)
    if not match:
        return SkillFrontmatter(name=fallback_name, description=""), content

    data = _scan_header(match.group(1))
    body = content[match.end() :]

    name = data.get("name") or fallback_name
    description = data.get("description", "")
    return SkillFrontmatter(name=name, description=description), body


def strip_frontmatter(content: str) -> str:
    """Return the body of a skill file, header removed and whitespace trimmed."""
    match = FRONTMATTER_RE.match(content)
    if not match:
        return content
    return content[match.end() :].strip()
