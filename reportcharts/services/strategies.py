"""Chart-type strategies that inject scale results into a chart configuration tree.

Each strategy receives an already deep-copied configuration and mutates only the
nodes that belong to its chart family. Structure is located by role through the
accessors below; any missing piece turns the strategy into a no-op for that part.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .history import history_for, normalize_history
from .labels import (
    axis_range,
    band_label,
    indicator_label,
    placement_offset,
    point_label,
    point_label_style,
    side_placement,
)
from .style import StyleProfile
from .value_lookup import lookup

logger = logging.getLogger(__name__)

Config = Dict[str, Any]
Strategy = Callable[
    [Config, Sequence[str], Mapping[str, Any], Mapping[str, Any], StyleProfile],
    Config,
]

STACKED_BAR_GAP = "0%"


# --- accessors -----------------------------------------------------------------


def series_list(config: Mapping[str, Any]) -> List[Dict[str, Any]]:
    series = config.get("series")
    if isinstance(series, dict):
        return [series]
    if not isinstance(series, list):
        return []
    return [entry for entry in series if isinstance(entry, dict)]


def indicator_point(series: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """First data point of a series' ``markLine``, if it is a mutable object."""

    mark_line = series.get("markLine")
    if not isinstance(mark_line, dict):
        return None
    data = mark_line.get("data")
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return None
    return data[0]


def find_indicator_series(config: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    for series in series_list(config):
        if indicator_point(series) is not None:
            return series
    return None


def find_line_overlay_series(config: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    for series in series_list(config):
        if series.get("type") == "line" and isinstance(series.get("markLine"), dict):
            return series
    return None


def scatter_series(config: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return [series for series in series_list(config) if series.get("type") == "scatter"]


def bar_series(config: Mapping[str, Any], stacked_only: bool = False) -> List[Dict[str, Any]]:
    bars = [series for series in series_list(config) if series.get("type") == "bar"]
    if stacked_only:
        bars = [series for series in bars if series.get("stack")]
    return bars


def _mutable_label(series: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    label = series.get("label")
    return label if isinstance(label, dict) else None


def _close_bar_gaps(config: Config, stacked_only: bool) -> None:
    for series in bar_series(config, stacked_only=stacked_only):
        series["barGap"] = STACKED_BAR_GAP


def _set_indicator(series: Dict[str, Any], value: Any, label_text: str) -> None:
    point = indicator_point(series)
    if point is None:
        return
    point["xAxis"] = value
    mark_label = series["markLine"].get("label")
    if isinstance(mark_label, dict):
        mark_label["formatter"] = label_text


# --- strategies ----------------------------------------------------------------


def apply_gradient_bar(
    config: Config,
    identifiers: Sequence[str],
    result_scales: Mapping[str, Any],
    history_by_scale: Mapping[str, Any],
    style: StyleProfile,
) -> Config:
    identifier = identifiers[0] if identifiers else None
    result = lookup(result_scales, identifier)
    if result is None:
        logger.info("No result for scale %s, gradient bar left unchanged", identifier)
        return config

    series = find_indicator_series(config)
    if series is None:
        logger.info("Gradient bar template has no indicator line")
        return config

    _set_indicator(series, result.value, indicator_label(result.value, result.cut_off_area))
    logger.debug("Indicator line for %s moved to %s", identifier, result.value)
    return config


def apply_stacked_bar(
    config: Config,
    identifiers: Sequence[str],
    result_scales: Mapping[str, Any],
    history_by_scale: Mapping[str, Any],
    style: StyleProfile,
) -> Config:
    identifier = identifiers[0] if identifiers else None
    result = lookup(result_scales, identifier)
    if result is None:
        logger.info("No result for scale %s, stacked bar left unchanged", identifier)
        return config

    series = find_line_overlay_series(config)
    if series is None or indicator_point(series) is None:
        logger.info("Stacked bar template has no line series with a markLine")
        return config

    _set_indicator(series, result.value, band_label(result.value, result.cut_off_area))
    _close_bar_gaps(config, stacked_only=True)
    return config


def _set_marker_point(series: Dict[str, Any], value: Any, category_index: int) -> None:
    data = series.get("data")
    if not isinstance(data, list):
        data = []
        series["data"] = data
    coordinate = [value, category_index]
    if not data:
        data.append(coordinate)
    elif isinstance(data[0], dict):
        data[0]["value"] = coordinate
    else:
        data[0] = coordinate


def apply_multi_stacked_bar(
    config: Config,
    identifiers: Sequence[str],
    result_scales: Mapping[str, Any],
    history_by_scale: Mapping[str, Any],
    style: StyleProfile,
) -> Config:
    markers = scatter_series(config)
    if not markers:
        logger.info("Multi stacked bar template has no scatter series")
        return config

    axis_min, axis_max = axis_range(config)
    updated = 0
    for index, series in enumerate(markers):
        if index >= len(identifiers):
            logger.debug("No scale identifier for scatter series %d", index)
            continue
        result = lookup(result_scales, identifiers[index])
        if result is None:
            logger.info("No result for scale %s", identifiers[index])
            continue

        _set_marker_point(series, result.value, index)
        label = _mutable_label(series)
        if label is not None:
            label["formatter"] = band_label(result.value, result.cut_off_area)
            side = side_placement(float(result.value), axis_min, axis_max)
            label["position"] = side
            label["offset"] = placement_offset(side, style.marker_label_offset)
        updated += 1

    if updated:
        _close_bar_gaps(config, stacked_only=False)
    logger.debug("Updated %d of %d scatter markers", updated, len(markers))
    return config


def apply_multi_single_bar(
    config: Config,
    identifiers: Sequence[str],
    result_scales: Mapping[str, Any],
    history_by_scale: Mapping[str, Any],
    style: StyleProfile,
) -> Config:
    series = series_list(config)
    data = series[0].get("data") if series else None
    if not isinstance(data, list):
        logger.info("Multi single bar template has no bar data")
        return config

    # Later template bars belong to earlier scales, so fill from the end backwards.
    for index in range(min(len(identifiers), len(data))):
        result = lookup(result_scales, identifiers[index])
        if result is None:
            logger.info("No result for scale %s", identifiers[index])
            continue
        data_index = len(data) - 1 - index
        if isinstance(data[data_index], dict):
            data[data_index]["value"] = result.value
        else:
            data[data_index] = result.value
    return config


def _point_x(point: Any) -> Any:
    if isinstance(point, dict):
        point = point.get("value")
    if isinstance(point, (list, tuple)) and point:
        return point[0]
    return None


def apply_line(
    config: Config,
    identifiers: Sequence[str],
    result_scales: Mapping[str, Any],
    history_by_scale: Mapping[str, Any],
    style: StyleProfile,
) -> Config:
    identifier = identifiers[0] if identifiers else None
    series = series_list(config)
    entries = normalize_history(history_for(history_by_scale, identifier))

    if entries:
        if not series:
            logger.info("Line template has no series to receive history")
            return config
        series[0]["data"] = [
            {"value": entry.value_pair(), "label": point_label_style(entry.label, style)}
            for entry in entries
        ]
        logger.debug("Line chart for %s filled with %d history points", identifier, len(entries))
        return config

    result = lookup(result_scales, identifier)
    if result is None:
        logger.info("No history or result for scale %s, line chart left unchanged", identifier)
        return config

    data = series[0].get("data") if series else None
    if not isinstance(data, list) or not data:
        logger.info("Line template has no data points to update")
        return config

    label = point_label_style(point_label(result.value, result.cut_off_area), style)
    x = _point_x(data[-1])
    data[-1] = {"value": [x, result.value] if x is not None else result.value, "label": label}
    return config


STRATEGIES: Dict[str, Strategy] = {
    "gradient-bar": apply_gradient_bar,
    "bar": apply_stacked_bar,
    "multi-bar": apply_multi_stacked_bar,
    "multi-single-bar": apply_multi_single_bar,
    "line": apply_line,
}
