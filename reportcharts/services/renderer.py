from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

import requests

from .dispatcher import ChartSpec, ResolvedChart, transform_batch
from .style import StyleProfile

logger = logging.getLogger(__name__)


class RendererError(RuntimeError):
    """Raised when the external rendering engine cannot produce an image."""


class ChartRenderer(Protocol):
    def render(self, config: Dict[str, Any], width: int, height: int) -> str:
        """Return the SVG markup for a resolved chart configuration."""


class RemoteRenderer:
    """Client for an external chart rendering service that answers with SVG markup."""

    def __init__(self, base_url: str, timeout: int = 30, session: Optional[requests.Session] = None) -> None:
        self.base = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def render(self, config: Dict[str, Any], width: int, height: int) -> str:
        payload = {"option": config, "width": width, "height": height, "renderer": "svg"}
        try:
            response = self._session.post(f"{self.base}/render", json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise RendererError(f"Render service call failed: {exc}") from exc

        svg = body.get("svg") if isinstance(body, dict) else None
        if not isinstance(svg, str) or not svg:
            raise RendererError("Render service response did not contain SVG markup.")
        return svg


@dataclass
class RenderedChart:
    svg: Optional[str]
    height: int
    extra_info: Any = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"svg": self.svg, "height": self.height, "extra_info": self.extra_info, "error": self.error}


def svg_data_uri(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def render_charts(
    specs: Iterable[ChartSpec],
    result_scales: Mapping[str, Any],
    history_by_scale: Mapping[str, Any],
    renderer: ChartRenderer,
    width: int = 800,
    style: Optional[StyleProfile] = None,
) -> List[RenderedChart]:
    """Resolve and render each chart, keeping failed charts in place with their error."""

    rendered: List[RenderedChart] = []
    for index, result in enumerate(transform_batch(specs, result_scales, history_by_scale, style)):
        if not isinstance(result, ResolvedChart):
            rendered.append(RenderedChart(svg=None, height=result.height, extra_info=result.extra_info, error=result.error))
            continue
        try:
            svg = renderer.render(result.config, width, result.height)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error rendering chart %d: %s", index, exc)
            rendered.append(RenderedChart(svg=None, height=result.height, extra_info=result.extra_info, error=str(exc)))
            continue
        rendered.append(RenderedChart(svg=svg_data_uri(svg), height=result.height, extra_info=result.extra_info))
    return rendered
