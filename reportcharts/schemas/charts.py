from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChartSpecModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Any = None
    scale_identifier: Any = None
    chart_json: Any = None
    height: Any = None
    extra_info: Any = None


class ScaleResultModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    value: Any = None
    cutOffArea: Any = None
    percentileRank: Any = None
    tScore: Any = None


class HistoryPointModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    date: Any = None
    value: Any = None
    cutOffArea: Any = None


class ChartBatchRequest(BaseModel):
    charts: List[ChartSpecModel]
    result_scales: Dict[str, ScaleResultModel] = Field(default_factory=dict)
    historical_data: Dict[str, List[HistoryPointModel]] = Field(default_factory=dict)
    style_profile: Optional[str] = Field(None, description="Label style profile, 'pdf' or 'svg'.")


class ChartResultModel(BaseModel):
    ok: bool
    type: str
    config: Any
    height: int
    extra_info: Any = None
    error: Optional[str] = None


class ResolveResponse(BaseModel):
    results: List[ChartResultModel]
    count: int
    failed: int
    audit_path: Optional[str] = Field(None, description="Filesystem path to persisted artifacts.")


class GenerateResponse(BaseModel):
    success: bool
    images: List[Optional[str]]
    heights: List[int]
    errors: List[Optional[str]]
    count: int


class TestResultReportRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    test: Optional[Dict[str, Any]] = None
    charts: List[ChartSpecModel] = Field(default_factory=list)
    result_scales: Dict[str, ScaleResultModel] = Field(default_factory=dict)
    historical_data: Dict[str, List[HistoryPointModel]] = Field(default_factory=dict)
