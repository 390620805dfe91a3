from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from .style import StyleProfile

Side = Literal["left", "right"]

HIGH_END_THRESHOLD = 0.7
_DEFAULT_AXIS_MIN = 0.0
_DEFAULT_AXIS_MAX = 100.0


def format_value(value: Any) -> str:
    """Render a number the way a JSON consumer would print it (``42`` rather than ``42.0``)."""

    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def _with_band(text: str, band: Optional[str]) -> str:
    return f"{text} ({band})" if band else text


def indicator_label(value: Any, band: Optional[str] = None) -> str:
    return _with_band(f"Wert: {format_value(value)}", band)


def band_label(value: Any, band: Optional[str] = None) -> str:
    if not band:
        return format_value(value)
    return f"{band} ({format_value(value)})"


def point_label(value: float, band: Optional[str] = None) -> str:
    return _with_band(f"{float(value):.1f}", band)


def point_label_style(text: str, style: StyleProfile) -> Dict[str, Any]:
    label: Dict[str, Any] = {
        "show": True,
        "formatter": text,
        "position": style.point_label_position,
        "fontSize": style.point_label_font_size,
        "color": style.point_label_color,
    }
    if style.point_label_font_family:
        label["fontFamily"] = style.point_label_font_family
    return label


def side_placement(value: float, axis_min: float, axis_max: float) -> Side:
    """Pick the label side that keeps a marker label inside the plot area.

    Values in the upper 30% of the axis get their label on the left so it is not
    clipped by the chart's right edge.
    """

    span = axis_max - axis_min
    if span == 0:
        return "right"
    relative = (value - axis_min) / span
    return "left" if relative > HIGH_END_THRESHOLD else "right"


def placement_offset(side: Side, distance: int) -> List[int]:
    return [-distance, 0] if side == "left" else [distance, 0]


def _numeric_bound(raw: Any, default: float) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not raw:
        return default
    return float(raw)


def axis_range(config: Mapping[str, Any]) -> Tuple[float, float]:
    axis = config.get("xAxis")
    if isinstance(axis, list):
        axis = axis[0] if axis else None
    if not isinstance(axis, Mapping):
        return _DEFAULT_AXIS_MIN, _DEFAULT_AXIS_MAX
    return (
        _numeric_bound(axis.get("min"), _DEFAULT_AXIS_MIN),
        _numeric_bound(axis.get("max"), _DEFAULT_AXIS_MAX),
    )
