from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class ScaleResult:
    identifier: str
    value: Any
    cut_off_area: Optional[str] = None
    percentile_rank: Optional[float] = None
    t_score: Optional[float] = None


def _record_for(result_scales: Mapping[str, Any], identifier: str) -> Any:
    if identifier in result_scales:
        return result_scales[identifier]
    return result_scales.get(identifier.lower())


def _numeric(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def lookup(result_scales: Mapping[str, Any] | None, identifier: str | None) -> Optional[ScaleResult]:
    """Resolve a scale's computed result, trying the identifier verbatim and then lower-cased.

    Returns ``None`` when the scale is unknown or carries no value yet; callers treat
    both cases as "nothing to inject".
    """

    if not result_scales or not identifier:
        return None
    record = _record_for(result_scales, identifier)
    if not isinstance(record, Mapping):
        return None
    value = _numeric(record.get("value"))
    if value is None:
        return None
    return ScaleResult(
        identifier=identifier,
        value=value,
        cut_off_area=record.get("cutOffArea") or None,
        percentile_rank=record.get("percentileRank"),
        t_score=record.get("tScore"),
    )
