from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .strategies import STRATEGIES
from .style import DEFAULT_STYLE, StyleProfile

logger = logging.getLogger(__name__)

DEFAULT_CHART_HEIGHT = 400


class ChartTemplateError(ValueError):
    """Raised when a chart template cannot be turned into a configuration object."""


@dataclass
class ChartSpec:
    type: str
    scale_identifiers: List[str]
    template: Any
    height: int = DEFAULT_CHART_HEIGHT
    extra_info: Any = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], default_height: int = DEFAULT_CHART_HEIGHT) -> "ChartSpec":
        """Build a spec from the wire shape (``chart_json``, ``scale_identifier``, ``extra_info``)."""

        template = payload.get("chart_json")
        if template is None:
            template = payload.get("template")
        identifiers = payload.get("scale_identifier")
        if identifiers is None:
            identifiers = payload.get("scale_identifiers")
        return cls(
            type=str(payload.get("type") or ""),
            scale_identifiers=split_identifiers(identifiers),
            template=template,
            height=_chart_height(payload.get("height"), default_height),
            extra_info=payload.get("extra_info"),
        )


@dataclass
class ResolvedChart:
    config: Dict[str, Any]
    chart_type: str
    height: int = DEFAULT_CHART_HEIGHT
    extra_info: Any = None
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "type": self.chart_type,
            "config": self.config,
            "height": self.height,
            "extra_info": self.extra_info,
            "error": None,
        }


@dataclass
class RenderFailure:
    template: Any
    error: str
    chart_type: str = ""
    height: int = DEFAULT_CHART_HEIGHT
    extra_info: Any = None
    ok: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": False,
            "type": self.chart_type,
            "config": self.template,
            "height": self.height,
            "extra_info": self.extra_info,
            "error": self.error,
        }


ChartResult = Union[ResolvedChart, RenderFailure]


def normalize_template(raw: Any) -> Dict[str, Any]:
    """Return a private, structured copy of a chart template given as object or JSON text."""

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise ChartTemplateError(f"Chart template is not valid JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ChartTemplateError(f"Chart template must be an object, got {type(raw).__name__}")
    return deepcopy(dict(raw))


def split_identifiers(raw: Union[str, Sequence[str], None]) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(part).strip() for part in raw]
    raw = str(raw)
    if not raw.strip():
        return []
    return [part.strip() for part in raw.split(",")]


def _chart_height(raw: Any, default: int) -> int:
    if isinstance(raw, bool):
        return default
    try:
        height = int(raw)
    except (TypeError, ValueError):
        return default
    return height if height > 0 else default


def resolve(
    spec: ChartSpec,
    result_scales: Optional[Mapping[str, Any]] = None,
    history_by_scale: Optional[Mapping[str, Any]] = None,
    style: Optional[StyleProfile] = None,
) -> ResolvedChart:
    config = normalize_template(spec.template)
    identifiers = split_identifiers(spec.scale_identifiers)
    strategy = STRATEGIES.get(spec.type)
    if strategy is None:
        logger.warning("Unknown chart type %r, passing template through", spec.type)
    else:
        logger.info("Processing %s chart for scales %s", spec.type, identifiers)
        config = strategy(config, identifiers, result_scales or {}, history_by_scale or {}, style or DEFAULT_STYLE)
    return ResolvedChart(config=config, chart_type=spec.type, height=spec.height, extra_info=spec.extra_info)


def transform_batch(
    specs: Iterable[ChartSpec],
    result_scales: Optional[Mapping[str, Any]] = None,
    history_by_scale: Optional[Mapping[str, Any]] = None,
    style: Optional[StyleProfile] = None,
) -> List[ChartResult]:
    """Resolve every chart independently; one chart failing never affects its siblings."""

    results: List[ChartResult] = []
    for index, spec in enumerate(specs):
        try:
            results.append(resolve(spec, result_scales, history_by_scale, style))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to resolve chart %d of type %r", index, spec.type)
            results.append(
                RenderFailure(
                    template=spec.template,
                    error=str(exc) or exc.__class__.__name__,
                    chart_type=spec.type,
                    height=spec.height,
                    extra_info=spec.extra_info,
                )
            )
    return results
