# Python 3.5
from __future__ import division

import re
import unicodedata
from typing import Optional, Set

from .feature_params import FeatureParams
from .tags import Tag

DEFAULT_LANG = "default"
INT_NAME_LANG = "int_name"

_KEY_TOKENS_RE = re.compile(r"[\t :]+")


def normalize_name(value: str) -> str:
    # Compatibility decomposition followed by canonical composition (NFKC),
    # for better search matching.
    return unicodedata.normalize("NFKC", value)


def lang_from_key(key: str) -> Optional[str]:
    tokens = [t for t in _KEY_TOKENS_RE.split(key) if t]
    if not tokens:
        return None
    # International (latin) name.
    if tokens[0] == INT_NAME_LANG:
        return INT_NAME_LANG
    if tokens[0] != "name":
        return None
    lang = tokens[1] if len(tokens) > 1 else DEFAULT_LANG
    # Dummy arabic tag.
    if lang == "ar1":
        lang = "ar"
    return lang


class NameExtractor(object):
    """Moves name tags of one element into `params.name`.

    Used with `for_each_tag`; always returns None so every tag is visited.
    """

    def __init__(self, params: FeatureParams) -> None:
        self.params = params
        self._saved = set()  # type: Set[str]

    def __call__(self, pos: int, tag: Tag) -> None:
        if not tag.value:
            return None
        lang = lang_from_key(tag.key)
        if lang is None:
            return None
        if lang not in self._saved:
            self._saved.add(lang)
            self.params.name.add_string(lang, normalize_name(tag.value))
        tag.consume()
        return None
