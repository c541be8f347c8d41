from __future__ import annotations
import logging

from narrow4df import utils
from narrow4df import schema_inspector, range_analyzer, type_selector
from narrow4df import column_rewriter, schema_validator
from narrow4df.table import Table
from narrow4df.column import Column
from narrow4df.common import NarrowingPolicy, EmptyColumnPolicy, LogicalType
from narrow4df.column_stats import ColumnStats
from narrow4df.schema_validator import Diff

log = logging.getLogger(__name__)


def resolve_columns(
    integer_columns: list[str], policy: NarrowingPolicy
) -> list[str]:
    """Integer columns to narrow, in table order."""
    if policy.columns is None:
        return integer_columns

    not_integer = [c for c in policy.columns if c not in integer_columns]
    _m = f'Cannot narrow columns that are not integer columns: {not_integer}'
    assert len(not_integer) == 0, _m
    return [c for c in integer_columns if c in policy.columns]


def choose_type(
    current_type: LogicalType,
    stats: ColumnStats,
    policy: NarrowingPolicy,
) -> LogicalType:
    empty_type = LogicalType.INT8
    if policy.empty_column == EmptyColumnPolicy.preserve:
        empty_type = current_type

    return type_selector.select_width(
        stats.bounds, empty_type=empty_type, column_name=stats.column_name
    )


def choose_nullable(
    current_nullable: bool,
    stats: ColumnStats,
    policy: NarrowingPolicy,
) -> bool:
    if policy.tighten_nullability and not stats.has_nulls:
        return False

    return current_nullable


def narrow_column(column: Column, policy: NarrowingPolicy) -> Column:
    stats = range_analyzer.column_stats(column)
    target_type = choose_type(column.logical_type, stats, policy)
    nullable = choose_nullable(column.nullable, stats, policy)
    return column_rewriter.rewrite(column, target_type, nullable=nullable)


def narrow(
    table: Table, policy: NarrowingPolicy | None = None
) -> tuple[Table, Diff]:
    """Rewrite every integer column of `table` to its narrowest width.

    The input table is left untouched, the narrowed table is validated
    against it before being returned.

    Parameters
    ----------
    table
        Table to narrow.
    policy
        Narrowing options, the defaults of `NarrowingPolicy` when `None`.

    Returns
    -------
    tuple of Table and Diff
        The narrowed table and its type changes.

    Examples
    --------
    >>> from narrow4df import Table, Column, LogicalType, narrow
    >>> table = Table([
    ...     Column(name='trial_num', logical_type=LogicalType.INT64,
    ...            nullable=True, values=(0, 1, 2, 125, 127)),
    ... ])
    >>> narrowed, diff = narrow(table)
    >>> narrowed.column('trial_num').logical_type
    LogicalType.INT8
    >>> diff.as_dict()
    {'trial_num': ('INT64', 'INT8')}
    """
    if policy is None:
        policy = NarrowingPolicy()

    integer_columns = schema_inspector.select_integer_columns(table)
    columns_to_narrow = resolve_columns(integer_columns, policy)
    narrowed_columns = [
        narrow_column(table.column(name), policy)
        for name in columns_to_narrow
    ]
    narrowed = table.with_columns(narrowed_columns)
    diff = schema_validator.validate(original=table, rewritten=narrowed)

    for name, change in diff.changes.items():
        log.info(f'Narrowed `{name}`: {change}')
    if log.isEnabledFor(logging.DEBUG):
        _schema = utils.format_schema(narrowed.schema)
        log.debug(f'Narrowed schema:\n{_schema}')

    return narrowed, diff
