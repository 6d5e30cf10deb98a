# Python 3.5
"""Read-only classification tree.

Loaded once from a JSON file of the form

    {"hidden": [["highway"], ...], "tree": {"highway": {"primary": {}, ...}, ...}}

and never modified afterwards, so one instance can be shared by any number of
threads classifying elements.
"""

from __future__ import division

import bisect
import json
import os
from collections import OrderedDict
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from . import type_code
from .type_code import EMPTY_VALUE

DEFAULT_CLASSIFICATOR_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                                          "classificator.json")


class ClassifNode(object):
    __slots__ = ("name", "index", "children", "_child_names")

    def __init__(self, name: str, index: int, children: Sequence["ClassifNode"]) -> None:
        self.name = name
        self.index = index
        self.children = tuple(children)  # type: Tuple[ClassifNode, ...]
        self._child_names = tuple(c.name for c in self.children)  # type: Tuple[str, ...]

    def find_child(self, label: str) -> Optional["ClassifNode"]:
        pos = bisect.bisect_left(self._child_names, label)
        if pos < len(self._child_names) and self._child_names[pos] == label:
            return self.children[pos]
        return None

    def __repr__(self) -> str:
        return "ClassifNode({!r}, {})".format(self.name, self.index)


def _build_node(name: str, index: int, subtree: Any, depth: int) -> ClassifNode:
    if not isinstance(subtree, dict):
        raise ValueError("Classificator node '{}' must be an object".format(name))
    if subtree and depth >= type_code.LEVELS_COUNT:
        raise ValueError("Classificator is deeper than {} levels at '{}'".format(
            type_code.LEVELS_COUNT, name))
    if len(subtree) > type_code.MAX_INDEX + 1:
        raise ValueError("Classificator node '{}' has too many children ({})".format(
            name, len(subtree)))
    children = []  # type: List[ClassifNode]
    for child_index, child_name in enumerate(sorted(subtree.keys())):
        if not child_name:
            raise ValueError("Empty classificator label under '{}'".format(name))
        children.append(_build_node(child_name, child_index, subtree[child_name], depth + 1))
    return ClassifNode(name, index, children)


class Classificator(object):
    def __init__(self, tree: Dict[str, Any], hidden: Iterable[Sequence[str]] = ()) -> None:
        self._root = _build_node("world", 0, tree, 0)
        hidden_types = set()
        for path in hidden:
            hidden_types.add(self.get_type_by_path(path))
        self._hidden = frozenset(hidden_types)  # type: FrozenSet[int]

    @property
    def root(self) -> ClassifNode:
        return self._root

    def find_node(self, path: Sequence[str]) -> Optional[ClassifNode]:
        node = self._root
        for label in path:
            child = node.find_child(label)
            if child is None:
                return None
            node = child
        return node

    def get_type_by_path(self, path: Sequence[str]) -> int:
        """Canonical code of a label path. Raises KeyError if the path is unknown."""
        node = self._root
        code = EMPTY_VALUE
        for label in path:
            child = node.find_child(label)
            if child is None:
                raise KeyError("Unknown classificator path: {}".format("-".join(path)))
            code = type_code.push_value(code, child.index)
            node = child
        if code == EMPTY_VALUE:
            raise KeyError("Empty classificator path")
        return code

    def path_of(self, code: int) -> Optional[List[str]]:
        level_count = type_code.get_level(code)
        if type_code.truncate(code, level_count) != code:
            return None
        node = self._root
        names = []  # type: List[str]
        for level in range(level_count):
            index = type_code.get_value(code, level)
            if index is None or index >= len(node.children):
                return None
            node = node.children[index]
            names.append(node.name)
        return names

    def get_readable_name(self, code: int) -> str:
        names = self.path_of(code)
        if not names:
            return "?"
        return "-".join(names)

    def is_drawable(self, code: int) -> bool:
        if not self.path_of(code):
            return False
        return code not in self._hidden


def load_classificator(path: Optional[str] = None) -> Classificator:
    with open(path or DEFAULT_CLASSIFICATOR_PATH, "r", encoding="utf-8") as handle:
        data = json.load(handle, object_pairs_hook=OrderedDict)
    if not isinstance(data, dict) or not isinstance(data.get("tree"), dict):
        raise ValueError("Classificator file must contain a 'tree' object")
    return Classificator(data["tree"], data.get("hidden", []))
