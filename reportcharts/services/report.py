from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from .renderer import RenderedChart

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"
DEFAULT_TEMPLATE = "test_result.html.j2"
PLACEHOLDER = "—"

_MISSING_MARKERS = {"", "null", "n.a."}
# Applied after escaping, so the tag arrives entity-encoded.
_LINE_TAG = re.compile(r"&lt;line&gt;(.*?)&lt;/line&gt;")
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_ITALIC = re.compile(r"\*(.*?)\*")


def has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and value in _MISSING_MARKERS:
        return False
    return True


def has_any_property_with_value(collection: Any, property_name: str) -> bool:
    if not isinstance(collection, Mapping):
        return False
    return any(isinstance(item, Mapping) and has_value(item.get(property_name)) for item in collection.values())


def format_number(value: Any, decimals: int = 1) -> str:
    if not has_value(value):
        return PLACEHOLDER
    try:
        return f"{float(value):.{decimals}f}"
    except (TypeError, ValueError):
        return PLACEHOLDER


def safe_value(value: Any, default: str = PLACEHOLDER) -> Any:
    return value if has_value(value) else default


def format_date(value: Any) -> str:
    if not value:
        return PLACEHOLDER
    if isinstance(value, (date, datetime)):
        return value.strftime("%d.%m.%Y")
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).strftime("%d.%m.%Y")
    except ValueError:
        return str(value)


def process_markdown(text: Any) -> Any:
    """Render the small markdown subset used in test descriptions (``**bold**``, ``*italic*``, ``<line>``)."""

    if not text:
        return text
    if isinstance(text, (list, tuple)):
        text = ", ".join(str(item) for item in text if has_value(item)) or PLACEHOLDER
    text = _LINE_TAG.sub(r'<span class="underline">\1</span>', str(escape(text)))
    text = _BOLD.sub(r"<strong>\1</strong>", text)
    text = _ITALIC.sub(r"<em>\1</em>", text)
    return Markup(text)


def build_environment(template_dir: Path = TEMPLATE_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters.update(
        {
            "format_number": format_number,
            "format_date": format_date,
            "process_markdown": process_markdown,
            "safe_value": safe_value,
        }
    )
    env.globals.update(
        {
            "has_value": has_value,
            "has_any_property_with_value": has_any_property_with_value,
        }
    )
    return env


def build_report_context(payload: Mapping[str, Any], charts: Iterable[RenderedChart]) -> Dict[str, Any]:
    result_scales = payload.get("result_scales") or {}
    context = dict(payload)
    context.update(
        {
            "chart_svgs": [chart.to_dict() for chart in charts],
            "has_cut_off": has_any_property_with_value(result_scales, "cutOffArea"),
            "has_percentile_rank": has_any_property_with_value(result_scales, "percentileRank"),
            "has_t_score": has_any_property_with_value(result_scales, "tScore"),
        }
    )
    return context


def render_report_html(
    payload: Mapping[str, Any],
    charts: Iterable[RenderedChart] = (),
    template_text: Optional[str] = None,
    env: Optional[Environment] = None,
) -> str:
    env = env or build_environment()
    template = env.from_string(template_text) if template_text else env.get_template(DEFAULT_TEMPLATE)
    return template.render(**build_report_context(payload, charts))
