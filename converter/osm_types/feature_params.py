# Python 3.5
from __future__ import division

import math
from collections import OrderedDict
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .tags import parse_atoi, parse_uint
from .type_code import format_code

LAYER_BOUND = 10
MAX_RANK = 255
HOUSE_NUMBER_MAX_LEN = 10


def is_house_number(value: str) -> bool:
    return bool(value) and "0" <= value[0] <= "9" and len(value) < HOUSE_NUMBER_MAX_LEN


def population_rank(population: int) -> int:
    if population < 1:
        return 0
    rank = int(math.floor(math.log(population) / math.log(1.1)))
    return max(0, min(MAX_RANK, rank))


def clamp_layer(layer: int) -> int:
    return max(-LAYER_BOUND, min(LAYER_BOUND, layer))


class StringMultilang(object):
    """Names keyed by language; one string per language, insertion ordered."""

    def __init__(self) -> None:
        self._names = OrderedDict()  # type: OrderedDict

    def add_string(self, lang: str, value: str) -> None:
        self._names[lang] = value

    def get_string(self, lang: str) -> Optional[str]:
        return self._names.get(lang)

    def clear(self) -> None:
        self._names.clear()

    def is_empty(self) -> bool:
        return not self._names

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._names.items())

    def as_dict(self) -> Dict[str, str]:
        return OrderedDict(self._names)


class FeatureParams(object):
    def __init__(self) -> None:
        self.types = []  # type: List[int]
        self.name = StringMultilang()
        self.house = ""
        self.house_name = ""
        self.street = ""
        self.flats = ""
        self.rank = 0
        self.ref = ""
        self.layer = 0
        self.reverse_geometry = False
        self.metadata = OrderedDict()  # type: OrderedDict

    def add_type(self, code: int, is_drawable: Optional[Callable[[int], bool]] = None) -> bool:
        if is_drawable is not None and not is_drawable(code):
            return False
        if code in self.types:
            return False
        self.types.append(code)
        return True

    def pop_exact_type(self, code: int) -> bool:
        if code not in self.types:
            return False
        self.types.remove(code)
        return True

    def finish_adding_types(self) -> None:
        self.types = sorted(set(self.types))

    def add_house_number(self, value: str) -> bool:
        if not is_house_number(value):
            return False
        # Drop leading zeros of plain numbers.
        number = parse_uint(value)
        self.house = str(number) if number is not None else value
        return True

    def add_house_name(self, value: str) -> None:
        if not self.house_name:
            self.house_name = value

    def add_street_address(self, value: str) -> None:
        self.street = value

    def set_population(self, value: str) -> None:
        population = parse_uint(value)
        if population is not None:
            self.rank = population_rank(population)

    def set_layer(self, value: str) -> None:
        if self.layer == 0:
            self.layer = clamp_layer(parse_atoi(value))

    def has_address(self) -> bool:
        return bool(self.house or self.house_name)

    def __repr__(self) -> str:
        return "FeatureParams(types={}, names={}, house={!r})".format(
            [format_code(t) for t in self.types], dict(self.name.items()), self.house)
