import logging
from collections.abc import Iterable, Iterator

from narrow4df.column import Column
from narrow4df.common import LogicalType
from narrow4df.errors import ColumnOverflowError

log = logging.getLogger(__name__)


def rewrite_values(
    values: Iterable[int | None],
    target_type: LogicalType,
    column_name: str,
) -> Iterator[int | None]:
    """Lazily re-emit `values` under `target_type`.

    Nulls pass through, present values are range checked and never truncated.
    """
    for value in values:
        if value is not None and not target_type.contains(value):
            raise ColumnOverflowError(
                column_name=column_name, value=value, logical_type=target_type
            )
        yield value


def rewrite(
    column: Column,
    target_type: LogicalType,
    nullable: bool | None = None,
) -> Column:
    """Build a new `column` with the logical type set to `target_type`.

    The result has the same name, row count, null positions and present
    values. The input is never modified, rewriting to the current type
    returns an equal but distinct Column.

    Parameters
    ----------
    column
        Integer column to rewrite.
    target_type
        Integer type, normally chosen by `type_selector.select_width`.
    nullable
        Overrides the nullable flag. Can be set to `False` only when the
        column holds no null.

    Raises
    ------
    ColumnOverflowError
        If a present value does not fit `target_type`.
    """
    _m = f'Column `{column.name}`: cannot rewrite {column.logical_type.name}'
    assert column.logical_type.is_integer, _m
    _m = f'Column `{column.name}`: cannot rewrite to {target_type.name}'
    assert target_type.is_integer, _m

    values = tuple(rewrite_values(column, target_type, column.name))
    if nullable is None:
        nullable = column.nullable
    elif nullable != column.nullable:
        if not nullable and None in values:
            _m = f'Column `{column.name}` has nulls, it must stay nullable!'
            raise ValueError(_m)
        log.warning(
            f'Column `{column.name}`: nullable {column.nullable} -> {nullable}'
        )

    return Column(
        name=column.name,
        logical_type=target_type,
        nullable=nullable,
        values=values,
    )
