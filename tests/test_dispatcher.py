import json

import pytest

from reportcharts.services.dispatcher import (
    ChartSpec,
    ChartTemplateError,
    RenderFailure,
    ResolvedChart,
    normalize_template,
    resolve,
    split_identifiers,
    transform_batch,
)


def _gradient_payload(scale="Depression", **extra):
    template = {
        "series": [
            {"type": "bar", "data": [100]},
            {"type": "line", "markLine": {"data": [{"xAxis": 0}], "label": {"formatter": ""}}},
        ]
    }
    payload = {"type": "gradient-bar", "scale_identifier": scale, "chart_json": json.dumps(template)}
    payload.update(extra)
    return payload


def test_split_identifiers():
    assert split_identifiers("A,B, C") == ["A", "B", "C"]
    assert split_identifiers(["A", "B"]) == ["A", "B"]
    assert split_identifiers("") == []
    assert split_identifiers(None) == []


def test_normalize_template_parses_text_and_copies_objects():
    template = {"series": [{"type": "bar", "data": [1]}]}
    copied = normalize_template(template)
    copied["series"][0]["data"].append(2)
    assert template["series"][0]["data"] == [1]
    assert normalize_template('{"series": []}') == {"series": []}


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", 42, None])
def test_normalize_template_rejects_non_objects(raw):
    with pytest.raises(ChartTemplateError):
        normalize_template(raw)


def test_from_payload_defaults():
    spec = ChartSpec.from_payload({"type": "line", "scale_identifier": "a,b", "chart_json": "{}"}, default_height=300)
    assert spec.scale_identifiers == ["a", "b"]
    assert spec.height == 300
    assert spec.extra_info is None


def test_resolve_does_not_mutate_shared_template():
    template = {"series": [{"type": "bar", "data": [{"value": 1}, {"value": 2}]}]}
    spec = ChartSpec(type="multi-single-bar", scale_identifiers=["A"], template=template)
    resolved = resolve(spec, {"A": {"value": 50}})
    assert resolved.config["series"][0]["data"][1]["value"] == 50
    assert template["series"][0]["data"][1]["value"] == 2


def test_resolve_is_deterministic():
    spec = ChartSpec.from_payload(_gradient_payload())
    scales = {"Depression": {"value": 42, "cutOffArea": "mild"}}
    assert resolve(spec, scales).config == resolve(spec, scales).config


def test_unknown_chart_type_passes_through():
    spec = ChartSpec.from_payload(_gradient_payload(type="radar", extra_info={"caption": "x"}))
    resolved = resolve(spec, {"Depression": {"value": 42}})
    assert resolved.config == normalize_template(spec.template)
    assert resolved.chart_type == "radar"
    assert resolved.extra_info == {"caption": "x"}


def test_transform_batch_keeps_order_and_isolates_failures():
    specs = [
        ChartSpec.from_payload(_gradient_payload(extra_info="first")),
        ChartSpec.from_payload({"type": "bar", "scale_identifier": "Depression", "chart_json": "{not json", "extra_info": "second"}),
        ChartSpec.from_payload(_gradient_payload(extra_info="third")),
    ]
    results = transform_batch(specs, {"Depression": {"value": 42}}, {})

    assert len(results) == 3
    assert isinstance(results[0], ResolvedChart)
    assert isinstance(results[1], RenderFailure)
    assert isinstance(results[2], ResolvedChart)
    assert [result.extra_info for result in results] == ["first", "second", "third"]

    assert results[1].template == "{not json"
    assert "not valid JSON" in results[1].error
    assert results[1].to_dict()["ok"] is False
    assert results[0].config["series"][1]["markLine"]["data"][0]["xAxis"] == 42
    assert results[2].to_dict()["ok"] is True


def test_transform_batch_catches_strategy_errors(monkeypatch):
    from reportcharts.services import dispatcher

    def _explode(*_args):
        raise RuntimeError("boom")

    monkeypatch.setitem(dispatcher.STRATEGIES, "gradient-bar", _explode)
    results = transform_batch([ChartSpec.from_payload(_gradient_payload())], {"Depression": {"value": 1}})
    assert len(results) == 1
    assert results[0].ok is False
    assert results[0].error == "boom"


def test_from_payload_coerces_loose_wire_values():
    spec = ChartSpec.from_payload({"type": "bar", "scale_identifier": 5, "chart_json": [1, 2], "height": "abc"})
    assert spec.scale_identifiers == ["5"]
    assert spec.height == 400
    assert spec.template == [1, 2]

    assert split_identifiers(5) == ["5"]
    assert split_identifiers(["A", 2]) == ["A", "2"]
    assert ChartSpec.from_payload({"height": "300"}).height == 300
    assert ChartSpec.from_payload({"height": -5}, default_height=250).height == 250
    assert ChartSpec.from_payload({"height": True}).height == 400


def test_transform_batch_fails_only_the_list_template():
    specs = [
        ChartSpec.from_payload(_gradient_payload()),
        ChartSpec.from_payload({"type": "bar", "scale_identifier": 5, "chart_json": [1, 2]}),
        ChartSpec.from_payload(_gradient_payload()),
    ]
    results = transform_batch(specs, {"Depression": {"value": 42}})
    assert [result.ok for result in results] == [True, False, True]
    assert results[1].template == [1, 2]
