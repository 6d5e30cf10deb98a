import pytest

from osm_types import type_code
from osm_types.type_code import ClassificationInvariantError


def test_encode_puts_first_level_in_high_byte():
    assert type_code.encode_path([0]) == 0x01000000
    assert type_code.encode_path([2, 0, 5]) == 0x03010600


def test_truncate_gives_prefix_code():
    code = type_code.encode_path([2, 0, 5, 7])
    assert type_code.truncate(code, 1) == type_code.encode_path([2])
    assert type_code.truncate(code, 2) == type_code.encode_path([2, 0])
    assert type_code.truncate(code, 3) == type_code.encode_path([2, 0, 5])
    assert type_code.truncate(code, 4) == code
    assert type_code.truncate(code, 0) == type_code.EMPTY_VALUE


def test_truncate_of_shorter_code_is_identity():
    code = type_code.encode_path([4, 1])
    assert type_code.truncate(code, 3) == code


def test_get_level_and_value():
    code = type_code.encode_path([3, 0])
    assert type_code.get_level(code) == 2
    assert type_code.get_value(code, 0) == 3
    assert type_code.get_value(code, 1) == 0
    assert type_code.get_value(code, 2) is None
    assert type_code.get_level(type_code.EMPTY_VALUE) == 0


def test_push_past_last_level_is_an_invariant_error():
    code = type_code.encode_path([0, 0, 0, 0])
    with pytest.raises(ClassificationInvariantError):
        type_code.push_value(code, 1)


def test_index_out_of_range_is_an_invariant_error():
    with pytest.raises(ClassificationInvariantError):
        type_code.push_value(type_code.EMPTY_VALUE, type_code.MAX_INDEX + 1)
    assert type_code.push_value(type_code.EMPTY_VALUE, type_code.MAX_INDEX) == 0xFF000000


def test_codes_fit_in_32_bits():
    code = type_code.encode_path([type_code.MAX_INDEX] * type_code.LEVELS_COUNT)
    assert code == 0xFFFFFFFF
