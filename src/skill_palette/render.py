"""Rendering of the palette state as a Rich panel."""

from __future__ import annotations

from rich.cells import cell_len
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .fuzzy import RECENT_GROUP
from .palette import PaletteState
from .theme import DEFAULT_THEME, Theme
from .types import Entry, Header, SkillSource

# Columns taken by the row prefix, separators and badges around a description
_ROW_OVERHEAD = 14


def _style(color: str, text: str) -> str:
    return f"[{color}]{text}[/{color}]"


def _truncate(text: str, width: int) -> str:
    line = Text(text.replace("\n", " "))
    line.truncate(width, overflow="ellipsis")
    return line.plain


def visible_window(total: int, selected: int, max_visible: int) -> tuple[int, int]:
    """Slice bounds of the rows to show, centred on the selection."""
    start = max(0, min(selected - max_visible // 2, total - max_visible))
    return start, min(start + max_visible, total)


def _render_search(state: PaletteState, theme: Theme) -> str:
    caret = _style(theme.accent_color, "│")
    if state.query:
        query_display = f"{escape(state.query)}{caret}"
    else:
        query_display = f"{caret}{_style(theme.dim_color, _style('italic', theme.placeholder))}"
    return f"{_style(theme.dim_color, theme.search_icon)}  {query_display}"


def _render_header(item: Header, theme: Theme) -> str:
    if item.namespace == RECENT_GROUP:
        return _style("bold", _style(theme.success_color, f"{theme.recent_icon} recent"))
    return _style("bold", _style(theme.warning_color, escape(item.namespace)))


def _render_entry(
    state: PaletteState, item: Entry, is_selected: bool, inner_width: int, theme: Theme
) -> str:
    skill = item.skill

    prefix = (
        _style(theme.accent_color, theme.cursor_icon)
        if is_selected
        else _style(theme.dim_color, theme.bullet_icon)
    )
    name = escape(skill.name)
    name_str = _style("bold", _style(theme.accent_color, name)) if is_selected else name

    # Flat (search) mode has no group headers, so tag each row with its namespace
    ns_plain = f"{item.namespace} " if state.is_searching else ""
    ns_tag = _style(theme.dim_color, escape(ns_plain)) if ns_plain else ""

    count_plain = ""
    if item.namespace == RECENT_GROUP:
        record = next((r for r in state.recents if r.name == skill.name), None)
        if record is not None and record.count > 1:
            count_plain = f" ×{record.count}"
    count_tag = _style(theme.dim_color, count_plain) if count_plain else ""

    local_plain = " [local]" if skill.source == SkillSource.LOCAL else ""
    local_badge = _style(theme.dim_color, escape(local_plain)) if local_plain else ""
    queued_badge = (
        f" {_style(theme.success_color, theme.queued_icon)}"
        if skill.name == state.queued_name
        else ""
    )

    used = (
        cell_len(ns_plain)
        + cell_len(skill.name)
        + cell_len(count_plain)
        + cell_len(local_plain)
        + _ROW_OVERHEAD
    )
    max_desc = max(0, inner_width - used)
    description = ""
    if max_desc > 3 and skill.description:
        description = f"  {_style(theme.dim_color, '—')}  " + _style(
            theme.dim_color, escape(_truncate(skill.description, max_desc))
        )

    return f"  {prefix} {ns_tag}{name_str}{count_tag}{local_badge}{queued_badge}{description}"


def _render_hints(state: PaletteState, theme: Theme) -> str:
    action = "select/unqueue" if state.queued_name else "select"
    parts = [("↑↓", "nav"), ("enter", action), ("esc", "cancel")]
    return "  ".join(
        f"{_style(theme.dim_color, _style('italic', key))} {_style(theme.dim_color, label)}"
        for key, label in parts
    )


def render_lines(state: PaletteState, inner_width: int, theme: Theme = DEFAULT_THEME) -> list[str]:
    """Render the palette body as Rich markup lines."""
    divider = _style(theme.border_color, "─" * inner_width)
    lines = ["", _render_search(state, theme), "", divider]

    items = state.display_items
    if not items:
        lines += ["", _style(theme.dim_color, _style("italic", "No matching skills")), ""]
    else:
        start, end = visible_window(len(items), state.selected_index, theme.max_visible)
        lines.append("")
        for i in range(start, end):
            item = items[i]
            if isinstance(item, Header):
                lines.append(_render_header(item, theme))
            elif isinstance(item, Entry):
                lines.append(
                    _render_entry(state, item, i == state.selected_index, inner_width, theme)
                )
            else:
                raise TypeError(f"Unknown display item: {item!r}")
        lines.append("")

        if len(items) > theme.max_visible:
            total = sum(1 for item in items if isinstance(item, Entry))
            current = sum(
                1 for item in items[: state.selected_index + 1] if isinstance(item, Entry)
            )
            lines += [_style(theme.dim_color, f"{current}/{total} skills"), ""]

    lines += [divider, "", _render_hints(state, theme)]
    return lines


def render_palette(state: PaletteState, width: int, theme: Theme = DEFAULT_THEME) -> Panel:
    """Render the palette as a bordered panel no wider than ``width``."""
    box_width = min(width, theme.panel_width)
    # Border and horizontal padding take two columns each side
    inner_width = max(10, box_width - 4)
    return Panel(
        "\n".join(render_lines(state, inner_width, theme)),
        title=_style(theme.accent_color, "Skills"),
        border_style=theme.border_color,
        width=box_width,
        padding=(0, 1),
    )
