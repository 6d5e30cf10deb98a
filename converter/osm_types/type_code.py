# Python 3.5
"""Bit-packed type codes.

A type is a 32 bit unsigned integer made of LEVELS_COUNT fields of
BITS_COUNT bits each. The shallowest level sits in the most significant
field. A field holds `index + 1` of the node at that level, 0 means the level
is absent, so every prefix of a path has its own code and `truncate` recovers
it from any deeper code.
"""

from __future__ import division

from typing import Iterable, Optional


BITS_COUNT = 8
LEVELS_COUNT = 4
FIELD_MASK = (1 << BITS_COUNT) - 1
MAX_INDEX = FIELD_MASK - 1
CODE_MASK = (1 << (BITS_COUNT * LEVELS_COUNT)) - 1

EMPTY_VALUE = 0


class ClassificationInvariantError(RuntimeError):
    """Raised when the engine's own bookkeeping is broken, never for bad input."""


def _shift(level: int) -> int:
    return BITS_COUNT * (LEVELS_COUNT - 1 - level)


def get_value(code: int, level: int) -> Optional[int]:
    field = (code >> _shift(level)) & FIELD_MASK
    if field == 0:
        return None
    return field - 1


def get_level(code: int) -> int:
    level = 0
    while level < LEVELS_COUNT and get_value(code, level) is not None:
        level += 1
    return level


def push_value(code: int, index: int) -> int:
    level = get_level(code)
    if level >= LEVELS_COUNT:
        raise ClassificationInvariantError(
            "Type {:#010x} has no free level for index {}".format(code, index))
    if index < 0 or index > MAX_INDEX:
        raise ClassificationInvariantError("Index {} out of range at level {}".format(index, level))
    return code | ((index + 1) << _shift(level))


def truncate(code: int, level: int) -> int:
    if level >= LEVELS_COUNT:
        return code & CODE_MASK
    if level <= 0:
        return EMPTY_VALUE
    keep = CODE_MASK ^ ((1 << _shift(level - 1)) - 1)
    return code & keep


def encode_path(indices: Iterable[int]) -> int:
    code = EMPTY_VALUE
    for index in indices:
        code = push_value(code, index)
    return code


def format_code(code: int) -> str:
    return "{:#010x}".format(code)
