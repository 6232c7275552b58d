"""Visual theme for the palette.

The Theme dataclass holds all configurable visual elements (colors, icons,
layout). Colors use Rich markup names.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from . import config


@dataclass(frozen=True)
class Theme:
    """Visual theme for the palette panel.

    Attributes:
        accent_color: Cursor, selected skill and search caret.
        success_color: Recent header and queued badge.
        warning_color: Namespace headers.
        dim_color: Secondary text (descriptions, hints, tags).
        border_color: Panel border.

        cursor_icon: Prefix of the selected row.
        bullet_icon: Prefix of the other rows.
        queued_icon: Badge for the queued skill.
        recent_icon: Prefix of the recent header.
        search_icon: Prefix of the search line.

        panel_width: Maximum panel width (shrinks to the terminal).
        max_visible: Rows of the display list shown at once.
        placeholder: Search line text while the query is empty.
    """

    # Colors
    accent_color: str = "cyan"
    success_color: str = "green"
    warning_color: str = "yellow"
    dim_color: str = "dim"
    border_color: str = "dim"

    # Icons
    cursor_icon: str = "▸"
    bullet_icon: str = "·"
    queued_icon: str = "●"
    recent_icon: str = "★"
    search_icon: str = "◎"

    # Layout
    panel_width: int = 76
    max_visible: int = 14
    placeholder: str = "type to filter... (namespace:skill)"

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> "Theme":
        """Theme with layout values taken from the loaded config."""
        return replace(
            cls(),
            panel_width=config.get_panel_width(cfg),
            max_visible=config.get_max_visible(cfg),
        )


# Default theme used when none is specified
DEFAULT_THEME = Theme()
