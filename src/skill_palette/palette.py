"""Palette state and input handling.

``handle_palette_input`` is a reducer over one key at a time: it either
mutates the state (cursor movement, query edits) and returns None, or returns
a terminal action and leaves the state untouched. It never touches anything
outside the state it is given.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .fuzzy import build_display_list, build_flat_list, filter_skills
from .keys import is_backspace, is_down, is_enter, is_escape, is_printable, is_up
from .types import Cancel, DisplayItem, Entry, PaletteAction, Select, Skill, SkillUsage, Unqueue


@dataclass
class PaletteState:
    """Everything the palette needs to render and handle input.

    Attributes:
        skills: Catalog snapshot taken when the palette was opened.
        display_items: Current display list, always derived from
            ``skills``, ``query`` and ``recents``.
        selected_index: Cursor into ``display_items``; points at an Entry
            whenever the list has one, 0 otherwise.
        query: Current filter text.
        queued_name: Name of the skill the host will inject next, if any.
        recents: Usage records, most recent first.
    """

    skills: list[Skill]
    display_items: list[DisplayItem] = field(default_factory=list)
    selected_index: int = 0
    query: str = ""
    queued_name: str | None = None
    recents: list[SkillUsage] = field(default_factory=list)

    @property
    def is_searching(self) -> bool:
        return bool(self.query.strip())


def _first_entry_index(items: list[DisplayItem]) -> int:
    for i, item in enumerate(items):
        if isinstance(item, Entry):
            return i
    return -1


def _next_entry_index(items: list[DisplayItem], start: int, direction: int) -> int:
    """Index of the next Entry from ``start`` in ``direction``, wrapping around."""
    idx = start + direction
    while 0 <= idx < len(items):
        if isinstance(items[idx], Entry):
            return idx
        idx += direction

    # Wrap
    indices = range(len(items)) if direction > 0 else range(len(items) - 1, -1, -1)
    for i in indices:
        if isinstance(items[i], Entry):
            return i
    return 0


def compute_display_items(
    skills: list[Skill], query: str, recents: list[SkillUsage]
) -> list[DisplayItem]:
    """Display list for a query.

    Searching gives a flat list in relevance order; browsing (empty query)
    gives the namespace-grouped list with recents on top.
    """
    filtered = filter_skills(skills, query)
    if query.strip():
        return build_flat_list(filtered)
    return build_display_list(filtered, recents)


def update_filter(state: PaletteState) -> None:
    """Recompute the display list and move the cursor to its first entry."""
    state.display_items = compute_display_items(state.skills, state.query, state.recents)
    first = _first_entry_index(state.display_items)
    state.selected_index = first if first >= 0 else 0


def create_palette_state(
    skills: list[Skill],
    queued_name: str | None = None,
    recents: list[SkillUsage] | None = None,
) -> PaletteState:
    """Build a fresh palette state with an empty query."""
    state = PaletteState(
        skills=list(skills),
        queued_name=queued_name,
        recents=list(recents or []),
    )
    update_filter(state)
    return state


def selected_skill(state: PaletteState) -> Skill | None:
    """Skill under the cursor, or None when nothing is selectable."""
    if 0 <= state.selected_index < len(state.display_items):
        item = state.display_items[state.selected_index]
        if isinstance(item, Entry):
            return item.skill
    return None


def handle_palette_input(state: PaletteState, data: str) -> PaletteAction | None:
    """Handle one chunk of key input.

    Returns:
        Select, Unqueue or Cancel when the palette should close; None after
        a state update (the caller should re-render).
    """
    if is_escape(data):
        return Cancel()

    if is_enter(data):
        skill = selected_skill(state)
        if skill is None:
            return None
        if skill.name == state.queued_name:
            return Unqueue(skill)
        return Select(skill)

    if is_up(data):
        state.selected_index = _next_entry_index(state.display_items, state.selected_index, -1)
        return None

    if is_down(data):
        state.selected_index = _next_entry_index(state.display_items, state.selected_index, +1)
        return None

    if is_backspace(data):
        if state.query:
            state.query = state.query[:-1]
            update_filter(state)
        return None

    if is_printable(data):
        state.query += data
        update_filter(state)

    return None
