import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from reportcharts.core.settings import get_settings
from reportcharts.services import ChartSpec, get_style, transform_batch

console = Console(soft_wrap=False)


def _load_request(path: str) -> Dict[str, Any]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("charts"), list):
        raise SystemExit(f"{path}: expected an object with a 'charts' list")
    if not all(isinstance(chart, dict) for chart in data["charts"]):
        raise SystemExit(f"{path}: every chart must be an object")
    return data


def _summary_table(specs: List[ChartSpec], results: List[Any]) -> Table:
    table = Table(title="Resolved charts")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Scales")
    table.add_column("Status")
    for idx, (spec, result) in enumerate(zip(specs, results)):
        status = "[green]ok[/green]" if result.ok else f"[red]failed[/red] {result.error}"
        table.add_row(str(idx), spec.type or "?", ", ".join(spec.scale_identifiers), status)
    return table


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve chart templates against test results.")
    parser.add_argument("request_json", help="JSON file with charts, result_scales and historical_data")
    parser.add_argument("--out", default=None, help="write resolved results to this JSON file")
    parser.add_argument("--style", default=None, help="label style profile (pdf or svg)")
    args = parser.parse_args(argv)

    settings = get_settings()
    request = _load_request(args.request_json)
    specs = [
        ChartSpec.from_payload(chart, default_height=settings.default_chart_height)
        for chart in request["charts"]
    ]
    results = transform_batch(
        specs,
        request.get("result_scales") or {},
        request.get("historical_data") or {},
        get_style(args.style or settings.style_profile),
    )

    console.print(_summary_table(specs, results))

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps([result.to_dict() for result in results], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        console.print(f"Wrote {len(results)} results to {out_path}")

    return 1 if any(not result.ok for result in results) else 0


if __name__ == "__main__":
    load_dotenv()
    sys.exit(main())
