import json

import pytest

from osm_types import classify_elements, config, run_classify, run_standalone
from osm_types.tags import OsmElement
from osm_types.telemetry import TelemetryLogger


ELEMENTS = [
    {"type": "way", "id": 10, "tags": {"highway": "residential", "oneway": "yes", "name": "Main St"}},
    {"type": "node", "id": 11, "tags": [["railway", "station"], ["station", "subway"],
                                         ["network", "London Underground"]]},
    {"type": "way", "id": 12, "tags": {"building": "yes", "addr:housenumber": "12A",
                                        "population": "1000", "ref": "M1"}},
    "not an element",
]


def test_element_from_json():
    element = OsmElement.from_json({"type": "node", "id": 5, "tags": {"ele": 120, "note": None}})
    assert element.osm_type == "node"
    assert element.osm_id == 5
    assert element.tag_pairs() == [("ele", "120"), ("note", "")]
    assert OsmElement.from_json({"tags": [["a", "b"], ["bad"]]}).tag_pairs() == [("a", "b")]


def test_classify_elements_records(classifier):
    records = classify_elements(ELEMENTS, classifier)
    assert len(records) == 3
    road, station, building = records
    assert road["osmId"] == 10
    assert road["typeNames"] == ["highway-residential", "hwtag-oneway"]
    assert road["names"] == {"default": "Main St"}
    assert sorted(station["typeNames"]) == ["railway-station-subway",
                                            "railway-station-subway-london"]
    assert building["houseNumber"] == "12A"
    assert building["rank"] == 72
    assert building["ref"] == "M1"
    assert building["typeNames"] == ["building"]


def test_run_classify_writes_output(tmp_path, capsys):
    input_path = tmp_path / "elements.json"
    input_path.write_text(json.dumps({"elements": ELEMENTS[:2]}), encoding="utf-8")
    records = run_classify(str(input_path), pretty_json=True, instrumentation=False)
    out_path = tmp_path / "elements-types.json"
    written = json.loads(out_path.read_text(encoding="utf-8"))
    assert len(written) == len(records) == 2
    assert written[0]["types"] == records[0]["types"]
    assert capsys.readouterr().out == ""


def test_run_standalone_with_instrumentation(tmp_path, capsys):
    input_path = tmp_path / "in.json"
    output_path = tmp_path / "out.json"
    input_path.write_text(json.dumps(ELEMENTS[:1]), encoding="utf-8")
    run_standalone([str(input_path), "--output", str(output_path), "--instrumentation"])
    out = capsys.readouterr().out
    assert "[osm-types] START classify-elements" in out
    assert "classified count=1 typed=1" in out
    summary = json.loads((tmp_path / "out.json.telemetry.json").read_text(encoding="utf-8"))
    assert [s["name"] for s in summary["stages"]] == [
        "load-classificator", "classify-elements", "write-output"]


def test_bad_input_shape(tmp_path):
    input_path = tmp_path / "in.json"
    input_path.write_text(json.dumps({"nodes": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        run_classify(str(input_path), instrumentation=False)


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv(config.INSTRUMENTATION_ENV_VAR, "on")
    assert config.instrumentation_enabled()
    assert not config.instrumentation_enabled(False)
    monkeypatch.setenv(config.INSTRUMENTATION_ENV_VAR, "maybe")
    assert config.parse_env_bool(config.INSTRUMENTATION_ENV_VAR) is None
    assert not config.instrumentation_enabled()

    monkeypatch.setenv(config.CLASSIFICATOR_ENV_VAR, "/tmp/custom.json")
    assert config.classificator_path() == "/tmp/custom.json"
    assert config.classificator_path("/x.json") == "/x.json"
    monkeypatch.delenv(config.CLASSIFICATOR_ENV_VAR)
    assert config.classificator_path().endswith("classificator.json")


def test_telemetry_stages_nest(capsys):
    telemetry = TelemetryLogger("t")
    with telemetry.stage("outer"):
        with telemetry.stage("inner") as counts:
            counts["n"] = 3
            telemetry.log("note", fields={"key": "a b", "skip": None})
    out = capsys.readouterr().out.splitlines()
    assert out[0].endswith("[t] START outer")
    assert out[1].endswith("[t] >> START inner")
    assert out[2].endswith('[t] >>>> note key="a b"')
    assert "[t] >> DONE inner " in out[3] and out[3].endswith(" n=3")
    assert "[t] DONE outer " in out[4]
    payload = telemetry.summary()
    assert payload["stages"][0]["children"][0]["counts"] == {"n": 3}


def test_telemetry_stage_mismatch():
    telemetry = TelemetryLogger("t", enabled=False)
    first = telemetry.start_stage("a")
    telemetry.start_stage("b")
    with pytest.raises(RuntimeError):
        telemetry.end_stage(first)
