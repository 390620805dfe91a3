from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from .labels import point_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    date: str
    value: float
    label: str

    def value_pair(self) -> List[Any]:
        return [self.date, self.value]


def parse_date(text: Any) -> Optional[date]:
    """Parse a ``DD.MM.YYYY`` string, returning ``None`` when it is not a real calendar date."""

    if not isinstance(text, str):
        return None
    parts = text.strip().split(".")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError:
        return None


def _numeric(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_history(points: Iterable[Mapping[str, Any]] | None) -> List[HistoryEntry]:
    """Turn raw history points into a chronologically ordered, labelled series.

    Points without a numeric value or with an unparsable date are dropped. The sort is
    stable, so points sharing a date keep their input order. The input is never mutated.
    """

    dated: List[tuple[date, HistoryEntry]] = []
    for point in points or []:
        if not isinstance(point, Mapping):
            continue
        value = _numeric(point.get("value"))
        parsed = parse_date(point.get("date"))
        if value is None or parsed is None:
            logger.debug("Dropping history point %r", point)
            continue
        band = point.get("cutOffArea") or None
        dated.append((parsed, HistoryEntry(date=point["date"], value=value, label=point_label(value, band))))

    dated.sort(key=lambda item: item[0])
    return [entry for _, entry in dated]


def history_for(history_by_scale: Mapping[str, Any] | None, identifier: str | None) -> List[Any]:
    if not history_by_scale or not identifier:
        return []
    points = history_by_scale.get(identifier)
    if points is None:
        points = history_by_scale.get(identifier.lower())
    return list(points) if isinstance(points, (list, tuple)) else []
