from narrow4df.bounds import Bounds
from narrow4df.common import LogicalType, INTEGER_TYPES
from narrow4df.errors import ColumnOverflowError


def select_width(
    bounds: Bounds,
    empty_type: LogicalType = LogicalType.INT8,
    column_name: str = '<unnamed>',
) -> LogicalType:
    """Narrowest integer type holding both ends of `bounds`.

    Candidates are tried from INT8 up to INT64, the ranges are nested, so the
    first match is the unique narrowest one.

    Parameters
    ----------
    bounds
        Bounds of the present values of a column.
    empty_type
        Returned for `EMPTY_BOUNDS`, there is no evidence to narrow from.
    column_name
        Only used in the error message.

    Raises
    ------
    ColumnOverflowError
        If the bounds do not fit INT64.

    Examples
    --------
    >>> from narrow4df.bounds import Bounds
    >>> select_width(Bounds(min_value=-50000, max_value=1000))
    LogicalType.INT32
    """
    if bounds.is_empty:
        _m = f'`empty_type` must be an integer type, got {empty_type}'
        assert empty_type.is_integer, _m
        return empty_type

    for candidate in INTEGER_TYPES:
        fits = (
            candidate.type_min <= bounds.min_value
            and bounds.max_value <= candidate.type_max
        )
        if fits:
            return candidate

    widest = INTEGER_TYPES[-1]
    out_of_range = (
        bounds.min_value if bounds.min_value < widest.type_min
        else bounds.max_value
    )
    raise ColumnOverflowError(
        column_name=column_name, value=out_of_range, logical_type=widest
    )
