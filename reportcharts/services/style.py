from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class StyleProfile:
    """Output-target specific label styling shared by all chart strategies."""

    name: str
    point_label_font_size: int
    point_label_color: str = "#333"
    point_label_font_family: Optional[str] = None
    point_label_position: str = "top"
    marker_label_offset: int = 15


STYLE_PROFILES: Dict[str, StyleProfile] = {
    "pdf": StyleProfile(name="pdf", point_label_font_size=10, point_label_font_family="Arial"),
    "svg": StyleProfile(name="svg", point_label_font_size=12),
}

DEFAULT_STYLE = STYLE_PROFILES["pdf"]


def get_style(name: str | None) -> StyleProfile:
    return STYLE_PROFILES.get((name or "").lower(), DEFAULT_STYLE)
