from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Sequence

from ..services.dispatcher import ChartResult


class AuditLogger:
    """Persist chart resolution runs for later inspection."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def persist(self, run_inputs: Dict[str, Any], results: Sequence[ChartResult]) -> Path:
        run_id = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        run_dir = self.root / run_id
        run_dir.mkdir(parents=True, exist_ok=False)

        payloads = [result.to_dict() for result in results]
        failures = [{"index": idx, **payload} for idx, payload in enumerate(payloads) if not payload["ok"]]

        self._write_json(run_dir / "inputs.json", run_inputs)
        self._write_json(run_dir / "resolved.json", payloads)
        self._write_json(run_dir / "failures.json", failures)
        return run_dir

    def _write_json(self, path: Path, data: Any) -> None:
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2, default=str), encoding="utf-8")
