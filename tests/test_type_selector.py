import pytest
from narrow4df import LogicalType, Bounds, EMPTY_BOUNDS, INTEGER_TYPES
from narrow4df import ColumnOverflowError
from narrow4df.type_selector import select_width

width_tests = [
    (Bounds(min_value=0, max_value=127), LogicalType.INT8),
    (Bounds(min_value=-128, max_value=0), LogicalType.INT8),
    (Bounds(min_value=0, max_value=128), LogicalType.INT16),
    (Bounds(min_value=-129, max_value=0), LogicalType.INT16),
    (Bounds(min_value=-32768, max_value=32767), LogicalType.INT16),
    (Bounds(min_value=-50000, max_value=1000), LogicalType.INT32),
    (Bounds(min_value=-2147483648, max_value=2147483647), LogicalType.INT32),
    (Bounds(min_value=2147483648, max_value=2147483648), LogicalType.INT64),
    (Bounds(min_value=-(2 ** 63), max_value=2 ** 63 - 1), LogicalType.INT64),
]


@pytest.mark.parametrize('test_args', width_tests)
def test_select_width(test_args: tuple[Bounds, LogicalType]) -> None:
    bounds, expected = test_args
    selected = select_width(bounds)
    assert selected == expected
    # No narrower candidate holds the bounds
    for candidate in INTEGER_TYPES[:INTEGER_TYPES.index(selected)]:
        holds_both = (
            candidate.contains(bounds.min_value)
            and candidate.contains(bounds.max_value)
        )
        assert not holds_both


def test_empty_bounds() -> None:
    assert select_width(EMPTY_BOUNDS) == LogicalType.INT8
    selected = select_width(EMPTY_BOUNDS, empty_type=LogicalType.INT64)
    assert selected == LogicalType.INT64


def test_bounds_beyond_int64() -> None:
    with pytest.raises(ColumnOverflowError) as e:
        select_width(
            Bounds(min_value=0, max_value=2 ** 63), column_name='huge'
        )
    assert e.value.column_name == 'huge'
    assert e.value.value == 2 ** 63
    assert e.value.logical_type == LogicalType.INT64
