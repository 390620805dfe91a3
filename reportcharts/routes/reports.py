from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from ..core.settings import Settings, get_settings
from ..schemas.charts import TestResultReportRequest
from ..services import ChartSpec, RemoteRenderer, RenderedChart, get_style, render_charts, render_report_html

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _render_report_charts(request: TestResultReportRequest, settings: Settings) -> List[RenderedChart]:
    specs = [
        ChartSpec.from_payload(chart.model_dump(), default_height=settings.default_chart_height)
        for chart in request.charts
    ]
    if not specs:
        return []
    if not settings.render_service_url:
        logger.warning("No render service configured, %d charts omitted from report", len(specs))
        return [
            RenderedChart(svg=None, height=spec.height, extra_info=spec.extra_info, error="renderer unavailable")
            for spec in specs
        ]
    renderer = RemoteRenderer(settings.render_service_url, timeout=settings.render_timeout)
    return render_charts(
        specs,
        {name: scale.model_dump() for name, scale in request.result_scales.items()},
        {name: [point.model_dump() for point in points] for name, points in request.historical_data.items()},
        renderer,
        width=settings.chart_width,
        style=get_style(settings.style_profile),
    )


@router.post("/test-result", response_class=HTMLResponse)
def test_result_report(request: TestResultReportRequest, settings: Settings = Depends(get_settings)) -> HTMLResponse:
    if not request.test:
        raise HTTPException(status_code=400, detail="Test data is required")

    charts = _render_report_charts(request, settings)
    payload = request.model_dump()
    html = render_report_html(payload, charts)
    logger.info("Assembled test result report with %d charts", len(charts))
    return HTMLResponse(content=html)
