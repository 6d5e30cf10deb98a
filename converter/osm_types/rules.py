# Python 3.5
from __future__ import division

from typing import Callable, Sequence

from .tags import OsmElement, Tag

# Value patterns:
#   * - take any value
#   ! - take only negative values
#   ~ - take only non-negative values
ANY_VALUE = "*"
NEGATIVE_VALUE = "!"
POSITIVE_VALUE = "~"

RULE_NEGATIVE_VALUES = ("no", "none", "false")

Effect = Callable[[Tag], None]


class Rule(object):
    __slots__ = ("key", "value", "effect")

    def __init__(self, key: str, value: str, effect: Effect) -> None:
        self.key = key
        self.value = value
        self.effect = effect

    def matches(self, tag: Tag) -> bool:
        if tag.key != self.key:
            return False
        if self.value == ANY_VALUE:
            return True
        if self.value == NEGATIVE_VALUE and is_negative(tag.value):
            return True
        if self.value == POSITIVE_VALUE and not is_negative(tag.value):
            return True
        return tag.value == self.value

    def __repr__(self) -> str:
        return "Rule({}={})".format(self.key, self.value)


def is_negative(value: str) -> bool:
    return value in RULE_NEGATIVE_VALUES


def apply_rules(element: OsmElement, rules: Sequence[Rule]) -> None:
    """Runs every rule against every live tag, tags in element order.

    A tag consumed by one effect is skipped by the rules that follow it.
    """
    for tag in element.tags:
        for rule in rules:
            if tag.is_void():
                break
            if rule.matches(tag):
                rule.effect(tag)


def action(func: Callable[[], None]) -> Effect:
    """Adapts a no-argument callback to the effect signature."""
    def effect(tag: Tag) -> None:
        func()
    return effect
