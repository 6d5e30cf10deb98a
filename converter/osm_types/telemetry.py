# Python 3.5
from __future__ import print_function

import contextlib
import datetime
import json
import sys
import time
from typing import Any, Dict, IO, Iterator, List, Optional


def utc_ts_fixed() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


def render_fields(fields: Optional[Dict[str, Any]]) -> str:
    """key=value pairs sorted by key. None values are left out, values with
    whitespace are JSON-quoted."""
    rendered = []  # type: List[str]
    for key, value in sorted((fields or {}).items()):
        if value is None:
            continue
        text = str(value)
        if text.split() != [text]:
            text = json.dumps(text, ensure_ascii=False)
        rendered.append("{}={}".format(key, text))
    return " ".join(rendered)


class TelemetryLogger(object):
    """Stage lines for the batch runner.

        2026-01-01 10:00:00.000 [osm-types] START classify-elements
        2026-01-01 10:00:00.120 [osm-types] >> classified count=1000 typed=812
        2026-01-01 10:00:00.121 [osm-types] DONE classify-elements 0.12s elements=1000

    Each stage yields a counts dict; the counts end up on the DONE line and in
    the JSON summary.
    """

    def __init__(self, component: str, enabled: bool = True, stream: Optional[IO[str]] = None):
        self.component = component
        self.enabled = enabled
        self.stream = stream
        self.started_at_utc = utc_ts_fixed()
        self._open = []  # type: List[Dict[str, Any]]
        self._done = []  # type: List[Dict[str, Any]]

    def _print(self, message: str) -> None:
        if not self.enabled:
            return
        prefix = "{} [{}]".format(utc_ts_fixed(), self.component)
        if self._open:
            prefix += " " + ">>" * len(self._open)
        print(prefix, message, file=self.stream or sys.stdout)

    def log(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        text = render_fields(fields)
        self._print(message + " " + text if text else message)

    def start_stage(self, name: str) -> Dict[str, Any]:
        self._print("START " + name)
        stage = {"name": name, "counts": {}, "children": [], "_t0": time.perf_counter()}
        self._open.append(stage)
        return stage

    def end_stage(self, stage: Dict[str, Any]) -> None:
        if not self._open or self._open[-1] is not stage:
            raise RuntimeError("Stage '{}' is not the innermost open stage".format(stage["name"]))
        self._open.pop()
        stage["sec"] = round(time.perf_counter() - stage.pop("_t0"), 3)
        self._print(" ".join(filter(None, [
            "DONE", stage["name"], "{:.2f}s".format(stage["sec"]), render_fields(stage["counts"])])))
        (self._open[-1]["children"] if self._open else self._done).append(stage)

    @contextlib.contextmanager
    def stage(self, name: str) -> Iterator[Dict[str, Any]]:
        current = self.start_stage(name)
        try:
            yield current["counts"]
        finally:
            self.end_stage(current)

    def summary(self, **extra: Any) -> Dict[str, Any]:
        payload = {
            "component": self.component,
            "startedAtUtc": self.started_at_utc,
            "endedAtUtc": utc_ts_fixed(),
            "stages": self._done,
        }  # type: Dict[str, Any]
        payload.update(extra)
        return payload

    def write_json(self, path: str, **extra: Any) -> None:
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(self.summary(**extra), handle, indent=2, ensure_ascii=False)
