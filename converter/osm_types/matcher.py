# Python 3.5
from __future__ import division

from typing import Callable, List, Optional, Set, TypeVar

from . import type_code
from .classificator import Classificator, ClassifNode
from .feature_params import FeatureParams
from .tags import OsmElement, Tag, for_each_tag, need_match_value
from .type_code import ClassificationInvariantError

T = TypeVar("T")


def _for_each_tag_ex(element: OsmElement, skip_tags: Set[int],
                     to_do: Callable[[Tag], Optional[T]]) -> Optional[T]:
    # Like for_each_tag, but never offers a tag position twice: a tag that
    # matched once (or looks like a name) goes to skip_tags.
    def visit(pos: int, tag: Tag) -> Optional[T]:
        if pos in skip_tags:
            return None
        if "name" in tag.key:
            skip_tags.add(pos)
            return None
        res = to_do(tag)
        if res:
            skip_tags.add(pos)
        return res
    return for_each_tag(element, visit)


def _encode(path: List[ClassifNode]) -> int:
    code = type_code.EMPTY_VALUE
    for node in path:
        code = type_code.push_value(code, node.index)
    return code


def match_types(element: OsmElement, params: FeatureParams, classificator: Classificator) -> List[int]:
    """Finds every classificator path the element's tags describe.

    Each pass starts from the root, takes the first tag whose key is a root
    category and then descends, preferring a match by tag value and falling
    back to a match by key (e.g. area=yes). Every finished path is encoded
    and kept if it is drawable. Tags are not consumed, but a tag used once is
    not offered again within this call.

    Returns the codes of all finished paths, drawable or not.
    """
    skip_tags = set()  # type: Set[int]
    path = []  # type: List[ClassifNode]
    current = classificator.root
    found = []  # type: List[int]

    def match_key(tag: Tag) -> bool:
        elem = current.find_child(tag.key)
        if elem is None:
            return False
        path.append(elem)
        if need_match_value(tag.key, tag.value):
            value_elem = elem.find_child(tag.value)
            if value_elem is not None:
                path.append(value_elem)
        return True

    def match_value(tag: Tag) -> Optional[ClassifNode]:
        if not need_match_value(tag.key, tag.value):
            return None
        return current.find_child(tag.value)

    while True:
        current = classificator.root
        del path[:]

        if not _for_each_tag_ex(element, skip_tags, match_key):
            break
        if not path:
            raise ClassificationInvariantError(
                "Root match left an empty path for {!r}".format(element))

        while True:
            current = path[-1]
            node = _for_each_tag_ex(element, skip_tags, match_value)
            if node is not None:
                path.append(node)
            elif not _for_each_tag_ex(element, skip_tags, match_key):
                break

        code = _encode(path)
        found.append(code)
        params.add_type(code, classificator.is_drawable)

    return found
