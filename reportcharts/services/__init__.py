from .dispatcher import (
    ChartSpec,
    ChartTemplateError,
    RenderFailure,
    ResolvedChart,
    normalize_template,
    resolve,
    split_identifiers,
    transform_batch,
)
from .history import normalize_history, parse_date
from .labels import side_placement
from .renderer import ChartRenderer, RemoteRenderer, RenderedChart, RendererError, render_charts
from .report import render_report_html
from .style import STYLE_PROFILES, StyleProfile, get_style
from .value_lookup import ScaleResult, lookup

__all__ = [
    "ChartSpec",
    "ChartTemplateError",
    "RenderFailure",
    "ResolvedChart",
    "normalize_template",
    "resolve",
    "split_identifiers",
    "transform_batch",
    "normalize_history",
    "parse_date",
    "side_placement",
    "ChartRenderer",
    "RemoteRenderer",
    "RenderedChart",
    "RendererError",
    "render_charts",
    "render_report_html",
    "STYLE_PROFILES",
    "StyleProfile",
    "get_style",
    "ScaleResult",
    "lookup",
]
