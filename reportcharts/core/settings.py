from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


@dataclass
class Settings:
    render_service_url: str | None
    render_timeout: int
    chart_width: int
    default_chart_height: int
    style_profile: str
    allowed_origins: list[str]
    audit_root: Path | None
    log_level: str


def _split_origins(raw: str) -> list[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    audit_env = os.getenv("CHART_AUDIT_ROOT")
    audit_root = None
    if audit_env:
        audit_root = Path(audit_env).resolve()
        audit_root.mkdir(parents=True, exist_ok=True)
    render_url = os.getenv("CHART_RENDER_URL") or None
    return Settings(
        render_service_url=render_url.rstrip("/") if render_url else None,
        render_timeout=int(os.getenv("CHART_RENDER_TIMEOUT", "30")),
        chart_width=int(os.getenv("CHART_WIDTH", "800")),
        default_chart_height=int(os.getenv("CHART_DEFAULT_HEIGHT", "400")),
        style_profile=os.getenv("CHART_STYLE_PROFILE", "pdf"),
        allowed_origins=_split_origins(os.getenv("ALLOWED_ORIGINS", "*")),
        audit_root=audit_root,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
