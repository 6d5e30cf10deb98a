# Python 3.5
from __future__ import division

import re
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

T = TypeVar("T")

NEGATIVE_VALUES = ("no", "false", "-1")

# True: never classified. False: classified even with a negative value.
PROCESSED_KEYS = (
    ("description", True),
    ("cycleway", True),      # [highway=primary][cycleway=lane] parsed as [highway=cycleway]
    ("proposed", True),      # [highway=proposed][proposed=primary] parsed as [highway=primary]
    ("construction", True),  # [highway=primary][construction=primary] parsed as [highway=construction]
    ("layer", False),
    ("oneway", False),
)

_NUMBER_RE = re.compile(r"[+-]?[0-9]+")
_ATOI_RE = re.compile(r"^\s*([+-]?[0-9]+)")


class Tag(object):
    """One key/value pair of an element.

    Consuming a tag clears both strings and marks it for good, so every later
    pass sees an empty key and skips it.
    """

    __slots__ = ("key", "value", "consumed")

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value
        self.consumed = False

    def consume(self) -> None:
        self.key = ""
        self.value = ""
        self.consumed = True

    def is_void(self) -> bool:
        return self.consumed or not self.key

    def __repr__(self) -> str:
        if self.consumed:
            return "Tag(<consumed>)"
        return "Tag({!r}, {!r})".format(self.key, self.value)


class OsmElement(object):
    def __init__(self, tags: Optional[List[Tuple[str, str]]] = None,
                 osm_type: Optional[str] = None, osm_id: Optional[int] = None) -> None:
        self.osm_type = osm_type
        self.osm_id = osm_id
        self.tags = [Tag(k, v) for k, v in (tags or [])]  # type: List[Tag]

    def add_tag(self, key: str, value: str) -> None:
        self.tags.append(Tag(key, value))

    def tag_pairs(self) -> List[Tuple[str, str]]:
        return [(t.key, t.value) for t in self.tags if not t.is_void()]

    @classmethod
    def from_json(cls, item: Dict[str, Any]) -> "OsmElement":
        raw_tags = item.get("tags")
        pairs = []  # type: List[Tuple[str, str]]
        if isinstance(raw_tags, dict):
            pairs = [(str(k), _value_text(v)) for k, v in raw_tags.items()]
        elif isinstance(raw_tags, list):
            for entry in raw_tags:
                if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                    continue
                pairs.append((str(entry[0]), _value_text(entry[1])))
        osm_id = item.get("id")
        return cls(pairs, osm_type=item.get("type"),
                   osm_id=osm_id if isinstance(osm_id, int) else None)

    def __repr__(self) -> str:
        return "OsmElement({}/{}, {!r})".format(self.osm_type, self.osm_id, self.tags)


def _value_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def is_number(value: str) -> bool:
    return bool(_NUMBER_RE.fullmatch(value))


def parse_atoi(value: str) -> int:
    # Leading sign and digits only, anything unparsable is 0.
    match = _ATOI_RE.match(value)
    if not match:
        return 0
    return int(match.group(1))


def parse_uint(value: str) -> Optional[int]:
    text = value.strip()
    if not text.isdigit() or not text.isascii():
        return None
    return int(text)


def need_match_value(key: str, value: str) -> bool:
    # Numbers are taxonomy labels only for these keys. A new numeric type in
    # the classificator has to be listed here too.
    if not is_number(value):
        return True
    return key in ("admin_level", "capital")


def ignore_tag(key: str, value: str) -> bool:
    if not key:
        return True
    for processed_key, ignored in PROCESSED_KEYS:
        if key == processed_key:
            return ignored
    return value in NEGATIVE_VALUES


def for_each_tag(element: OsmElement, to_do: Callable[[int, Tag], Optional[T]]) -> Optional[T]:
    """Calls `to_do` for each visible tag and returns its first truthy result."""
    for pos, tag in enumerate(element.tags):
        if tag.consumed or ignore_tag(tag.key, tag.value):
            continue
        res = to_do(pos, tag)
        if res:
            return res
    return None
