# Python 3.5
from __future__ import division

import argparse
import json
import os
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

from typing_extensions import TypedDict

from . import config
from .classificator import Classificator, load_classificator
from .feature_params import FeatureParams
from .osm2type import TagClassifier
from .tags import OsmElement
from .telemetry import TelemetryLogger
from .type_code import ClassificationInvariantError


FeatureRecord = TypedDict(
    "FeatureRecord",
    {
        "osmType": Optional[str],
        "osmId": Optional[int],
        "types": List[int],
        "typeNames": List[str],
        "names": Dict[str, str],
        "houseNumber": str,
        "houseName": str,
        "street": str,
        "flats": str,
        "rank": int,
        "ref": str,
        "layer": int,
        "reverseGeometry": bool,
        "metadata": Dict[str, str],
    }
)


def feature_record(element: OsmElement, params: FeatureParams,
                   classificator: Classificator) -> FeatureRecord:
    return FeatureRecord(
        osmType=element.osm_type,
        osmId=element.osm_id,
        types=list(params.types),
        typeNames=[classificator.get_readable_name(t) for t in params.types],
        names=params.name.as_dict(),
        houseNumber=params.house,
        houseName=params.house_name,
        street=params.street,
        flats=params.flats,
        rank=params.rank,
        ref=params.ref,
        layer=params.layer,
        reverseGeometry=params.reverse_geometry,
        metadata=OrderedDict(params.metadata),
    )


def classify_elements(items: Iterable[Dict[str, Any]], classifier: TagClassifier,
                      telemetry: Optional[TelemetryLogger] = None) -> List[FeatureRecord]:
    records = []  # type: List[FeatureRecord]
    skipped = 0
    typed = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        element = OsmElement.from_json(item)
        params = classifier.get_name_and_type(element)
        if params.types:
            typed += 1
        records.append(feature_record(element, params, classifier.classificator))
    if telemetry is not None:
        telemetry.log("classified", fields={
            "count": len(records),
            "typed": typed,
            "skipped": skipped or None,
        })
    return records


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle, object_pairs_hook=OrderedDict)


def _write_json(path: str, value: Any, pretty_json: bool = False) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        if pretty_json:
            json.dump(value, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        else:
            json.dump(value, handle, separators=(",", ":"), ensure_ascii=False)


def _input_items(data: Any) -> List[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("elements"), list):
        return data["elements"]
    raise ValueError("Input must be a list of elements or an object with an 'elements' list")


def run_classify(input_path: str, output_path: Optional[str] = None,
                 classificator_path: Optional[str] = None,
                 pretty_json: Optional[bool] = None,
                 instrumentation: Optional[bool] = None) -> List[FeatureRecord]:
    telemetry = TelemetryLogger("osm-types", enabled=config.instrumentation_enabled(instrumentation))

    with telemetry.stage("load-classificator") as counts:
        classificator = load_classificator(config.classificator_path(classificator_path))
        counts["roots"] = len(classificator.root.children)
    classifier = TagClassifier(classificator)

    with telemetry.stage("classify-elements") as counts:
        items = _input_items(_load_json(input_path))
        records = classify_elements(items, classifier, telemetry)
        counts["elements"] = len(records)

    if output_path is None:
        base, _ = os.path.splitext(input_path)
        output_path = base + "-types.json"
    with telemetry.stage("write-output"):
        _write_json(output_path, records, pretty_json=config.pretty_json_enabled(pretty_json))

    if telemetry.enabled:
        telemetry.write_json(output_path + ".telemetry.json", input=input_path, output=output_path)
    return records


def run_standalone(args: List[str]) -> List[FeatureRecord]:
    parser = argparse.ArgumentParser(description="Classify OSM element tags into feature types")
    parser.add_argument("input_path", help="JSON list of elements: {type, id, tags}")
    parser.add_argument("--output", dest="output_path",
                        help="output path, default INPUT-types.json")
    parser.add_argument("--classificator", dest="classificator_path",
                        help="classificator JSON, default ${} or the bundled one".format(
                            config.CLASSIFICATOR_ENV_VAR))
    parser.add_argument("--pretty", action="store_true", default=None, help="indent output JSON")
    parser.add_argument("--instrumentation", action="store_true", default=None,
                        help="print stage timings and write a telemetry summary")
    parsed = parser.parse_args(args)
    return run_classify(parsed.input_path, parsed.output_path,
                        classificator_path=parsed.classificator_path,
                        pretty_json=parsed.pretty,
                        instrumentation=parsed.instrumentation)


__all__ = [
    "ClassificationInvariantError",
    "Classificator",
    "FeatureParams",
    "FeatureRecord",
    "OsmElement",
    "TagClassifier",
    "classify_elements",
    "feature_record",
    "load_classificator",
    "run_classify",
    "run_standalone",
]
