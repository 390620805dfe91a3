from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, Depends, HTTPException

from ..core.settings import Settings, get_settings
from ..schemas.charts import ChartBatchRequest, ChartResultModel, GenerateResponse, ResolveResponse
from ..services import ChartSpec, RemoteRenderer, get_style, render_charts, transform_batch
from ..utils.audit import AuditLogger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/charts", tags=["charts"])


def _unpack(request: ChartBatchRequest, settings: Settings) -> Tuple[List[ChartSpec], Dict[str, Any], Dict[str, Any]]:
    specs = [
        ChartSpec.from_payload(chart.model_dump(), default_height=settings.default_chart_height)
        for chart in request.charts
    ]
    result_scales = {name: scale.model_dump() for name, scale in request.result_scales.items()}
    history = {
        name: [point.model_dump() for point in points]
        for name, points in request.historical_data.items()
    }
    return specs, result_scales, history


def _build_renderer(settings: Settings) -> RemoteRenderer:
    if not settings.render_service_url:
        raise HTTPException(status_code=503, detail="No chart render service configured (CHART_RENDER_URL).")
    return RemoteRenderer(settings.render_service_url, timeout=settings.render_timeout)


@router.post("/resolve", response_model=ResolveResponse)
def resolve_charts(request: ChartBatchRequest, settings: Settings = Depends(get_settings)) -> ResolveResponse:
    specs, result_scales, history = _unpack(request, settings)
    style = get_style(request.style_profile or settings.style_profile)
    logger.info("Resolving %d charts (style=%s)", len(specs), style.name)

    results = transform_batch(specs, result_scales, history, style)
    failed = sum(1 for result in results if not result.ok)

    audit_path = None
    if settings.audit_root is not None:
        audit_path = AuditLogger(settings.audit_root).persist(
            run_inputs=request.model_dump(),
            results=results,
        )

    return ResolveResponse(
        results=[ChartResultModel.model_validate(result.to_dict()) for result in results],
        count=len(results),
        failed=failed,
        audit_path=str(audit_path) if audit_path else None,
    )


@router.post("/generate", response_model=GenerateResponse)
def generate_charts(request: ChartBatchRequest, settings: Settings = Depends(get_settings)) -> GenerateResponse:
    renderer = _build_renderer(settings)
    specs, result_scales, history = _unpack(request, settings)
    style = get_style(request.style_profile or settings.style_profile)

    rendered = render_charts(specs, result_scales, history, renderer, width=settings.chart_width, style=style)
    logger.info(
        "Rendered %d charts, %d failed",
        len(rendered),
        sum(1 for chart in rendered if chart.error),
    )
    return GenerateResponse(
        success=True,
        images=[chart.svg for chart in rendered],
        heights=[chart.height for chart in rendered],
        errors=[chart.error for chart in rendered],
        count=len(rendered),
    )


@router.get("/health")
def charts_health() -> Dict[str, str]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "Chart Generation Service",
    }
