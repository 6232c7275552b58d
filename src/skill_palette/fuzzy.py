"""Query scoring and skill filtering.

Scoring tiers (highest wins):
    1. Exact match                            -> 10000
    2. Text starts with query                 -> 5000 + length bonus
    3. Query is a substring of text           -> 1000 + length bonus (+200 at a word boundary)
    4. Query chars appear in order with a
       long enough consecutive run            -> 100..999
    5. No match                               -> 0
"""

from __future__ import annotations

import math

from .types import DisplayItem, Entry, Header, Skill, SkillUsage

EXACT_SCORE = 10000
PREFIX_SCORE = 5000
SUBSTRING_SCORE = 1000
BOUNDARY_BONUS = 200
FUZZY_SCORE = 100
FUZZY_CEILING = SUBSTRING_SCORE - 1
DESCRIPTION_SCORE = 500

# Weight of a "namespace:name" match relative to a bare name match
NAMESPACED_WEIGHT = 0.9
# Weight of a description match inside a namespace-scoped query
SCOPED_DESCRIPTION_WEIGHT = 0.3

RECENT_GROUP = "recent"
OTHER_NAMESPACE = "other"

_WORD_SEPARATORS = ("-", " ")


def _length_bonus(query: str, text: str) -> float:
    return len(query) / len(text) * 100


def score_match(query: str, text: str) -> float:
    """Score how well ``query`` matches ``text`` (case-insensitive).

    Returns 0 when the text does not match at all.
    """
    lq = query.lower()
    lt = text.lower()

    if lt == lq:
        return EXACT_SCORE

    if lt.startswith(lq):
        return PREFIX_SCORE + _length_bonus(lq, lt)

    sub_idx = lt.find(lq)
    if sub_idx >= 0:
        at_boundary = sub_idx == 0 or lt[sub_idx - 1] in _WORD_SEPARATORS
        return SUBSTRING_SCORE + _length_bonus(lq, lt) + (BOUNDARY_BONUS if at_boundary else 0)

    # Fuzzy: all chars in order, tracking the longest consecutive run
    qi = 0
    max_run = 0
    current_run = 0
    matched = 0
    for ch in lt:
        if qi >= len(lq):
            break
        if ch == lq[qi]:
            current_run += 1
            matched += 1
            max_run = max(max_run, current_run)
            qi += 1
        else:
            current_run = 0

    if qi < len(lq):
        return 0

    # Scattered short queries match nearly everything; require real runs
    if len(lq) <= 2 and max_run < len(lq):
        return 0
    if max_run < math.ceil(len(lq) * 0.4):
        return 0

    score = FUZZY_SCORE + max_run * 30 + (matched / len(lt)) * 50
    return min(score, FUZZY_CEILING)


def _rank(scored: list[tuple[Skill, float]]) -> list[Skill]:
    """Drop non-matches and sort by score, keeping catalog order for ties."""
    matches = [(skill, score) for skill, score in scored if score > 0]
    matches.sort(key=lambda pair: pair[1], reverse=True)
    return [skill for skill, _ in matches]


def _description_score(query: str, description: str) -> float:
    """Substring-only description score. Fuzzy description hits are too noisy."""
    desc = description.lower()
    if desc and query in desc:
        return DESCRIPTION_SCORE + _length_bonus(query, desc)
    return 0


def filter_skills(skills: list[Skill], query: str) -> list[Skill]:
    """Filter and rank skills for a query.

    Supported query forms:
        - ``marketing``      exact (or uniquely prefixed) namespace: whole group
        - ``marketing:ad``   skills in namespaces starting with ``marketing``,
                             ranked by ``ad``
        - ``ad-cre``         fuzzy name / substring description match everywhere

    Args:
        skills: Catalog in discovery order.
        query: Raw query text.

    Returns:
        Matching skills, best first. An empty query returns the catalog as-is.
    """
    lower_query = query.strip().lower()
    if not lower_query:
        return list(skills)

    colon_idx = lower_query.find(":")
    if colon_idx > 0:
        ns_filter = lower_query[:colon_idx]
        name_query = lower_query[colon_idx + 1 :].strip()
        ns_skills = [s for s in skills if s.namespace.lower().startswith(ns_filter)]
        if not name_query:
            return ns_skills
        return _rank(
            [
                (
                    skill,
                    max(
                        score_match(name_query, skill.name),
                        score_match(name_query, skill.description) * SCOPED_DESCRIPTION_WEIGHT,
                    ),
                )
                for skill in ns_skills
            ]
        )

    # An exact namespace name wins over name/description matching
    exact_ns = [s for s in skills if s.namespace.lower() == lower_query]
    if exact_ns:
        return exact_ns

    prefixed = {s.namespace.lower() for s in skills if s.namespace.lower().startswith(lower_query)}
    if len(prefixed) == 1:
        (only_ns,) = prefixed
        return [s for s in skills if s.namespace.lower() == only_ns]

    return _rank(
        [
            (
                skill,
                max(
                    score_match(lower_query, skill.name),
                    score_match(lower_query, skill.ref) * NAMESPACED_WEIGHT,
                    _description_score(lower_query, skill.description),
                ),
            )
            for skill in skills
        ]
    )


def _namespace_sort_key(namespace: str) -> tuple[bool, str, str]:
    return (namespace == OTHER_NAMESPACE, namespace.lower(), namespace)


def build_display_list(skills: list[Skill], recents: list[SkillUsage]) -> list[DisplayItem]:
    """Group skills by namespace with headers, recently used skills first.

    Namespaces are sorted alphabetically with ``other`` always last; skills are
    sorted by name within their group. Recent skills appear only in the
    ``recent`` group, in recency order.
    """
    items: list[DisplayItem] = []
    by_name = {skill.name: skill for skill in skills}

    recent_skills = [by_name[r.name] for r in recents if r.name in by_name]
    if recent_skills:
        items.append(Header(RECENT_GROUP))
        items.extend(Entry(skill, RECENT_GROUP) for skill in recent_skills)

    recent_names = {r.name for r in recents}
    groups: dict[str, list[Skill]] = {}
    for skill in skills:
        if skill.name in recent_names:
            continue
        groups.setdefault(skill.namespace, []).append(skill)

    for namespace in sorted(groups, key=_namespace_sort_key):
        items.append(Header(namespace))
        for skill in sorted(groups[namespace], key=lambda s: (s.name.lower(), s.name)):
            items.append(Entry(skill, namespace))

    return items


def build_flat_list(skills: list[Skill]) -> list[DisplayItem]:
    """Ranked results as plain entries, each labelled with its own namespace."""
    return [Entry(skill, skill.namespace) for skill in skills]
