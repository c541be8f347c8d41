"""
Post-rewrite checks.

Any violation is a defect of the rewriting code, never a data condition, so
it is raised as `SchemaMismatchError` and not recovered from.
"""
from __future__ import annotations
import logging
from typing import Any
from collections.abc import Mapping
from dataclasses import dataclass, field

from narrow4df.table import Table
from narrow4df.column import Column
from narrow4df.schema import Schema, Field
from narrow4df.common import LogicalType
from narrow4df.column_stats import ColumnStats
from narrow4df.errors import SchemaMismatchError
from narrow4df import range_analyzer

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ColumnChange:
    old_type: LogicalType
    new_type: LogicalType
    old_nullable: bool
    new_nullable: bool

    def __str__(self) -> str:
        _s = f'{self.old_type.name} -> {self.new_type.name}'
        if self.old_nullable != self.new_nullable:
            _s = f'{_s}, nullable {self.old_nullable} -> {self.new_nullable}'

        return _s


@dataclass(frozen=True, kw_only=True)
class Diff:
    """Per column changes between the original and the rewritten schema.

    Only the changed columns are present, in table order.
    """
    changes: dict[str, ColumnChange] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return len(self.changes) == 0

    def as_dict(self) -> dict[str, tuple[str, str]]:
        return {
            name: (change.old_type.name, change.new_type.name)
            for name, change in self.changes.items()
        }

    def __str__(self) -> str:
        if self.is_empty:
            return 'No changes.'

        _pad = max(len(n) for n in self.changes)
        rows = ['Changes:']
        rows.extend([
            f'{name.ljust(_pad)} {change}'
            for name, change in self.changes.items()
        ])
        return '\n'.join(rows)


def _build_change(original: Field, rewritten: Field) -> ColumnChange | None:
    is_same = (
        original.logical_type == rewritten.logical_type
        and original.nullable == rewritten.nullable
    )
    if is_same:
        return None

    return ColumnChange(
        old_type=original.logical_type,
        new_type=rewritten.logical_type,
        old_nullable=original.nullable,
        new_nullable=rewritten.nullable,
    )


def _check_field(
    original: Field, rewritten: Field, stats: ColumnStats | None
) -> None:
    name = original.name
    if not original.logical_type.is_integer:
        is_same = (
            rewritten.logical_type == original.logical_type
            and rewritten.native_type == original.native_type
        )
        if not is_same:
            _m = (
                f'type changed from {original.type_name} '
                f'to {rewritten.type_name}'
            )
            raise SchemaMismatchError(_m, column_name=name)
        return None

    if not rewritten.logical_type.is_integer:
        _m = f'integer column rewritten to {rewritten.type_name}'
        raise SchemaMismatchError(_m, column_name=name)

    _m = f'Column `{name}`: missing ColumnStats'
    assert stats is not None, _m
    if stats.has_nulls and not rewritten.nullable:
        _m = f'{stats.null_count} nulls in a non-nullable column'
        raise SchemaMismatchError(_m, column_name=name)

    bounds = stats.bounds
    if bounds.is_empty:
        return None

    new_type = rewritten.logical_type
    fits = new_type.contains(bounds.min_value) and \
        new_type.contains(bounds.max_value)
    if not fits:
        _m = (
            f'bounds ({bounds.min_value}, {bounds.max_value}) do not fit '
            f'{new_type.name} [{new_type.type_min}, {new_type.type_max}]'
        )
        raise SchemaMismatchError(_m, column_name=name)

    return None


def validate_schemas(
    original: Schema,
    rewritten: Schema,
    stats: Mapping[str, ColumnStats],
) -> Diff:
    """Schema level checks, for sources that are never fully materialized.

    Parameters
    ----------
    original
        Schema before rewriting.
    rewritten
        Schema after rewriting.
    stats
        ColumnStats of the original integer columns, by column name.
    """
    if original.names != rewritten.names:
        _m = (
            f'column sequence changed from {original.names} '
            f'to {rewritten.names}'
        )
        raise SchemaMismatchError(_m)

    changes = {}
    for orig_field, new_field in zip(original, rewritten):
        _check_field(orig_field, new_field, stats.get(orig_field.name))
        change = _build_change(orig_field, new_field)
        if change is not None:
            changes[orig_field.name] = change

    return Diff(changes=changes)


def _same_value(v1: Any, v2: Any) -> bool:
    """Equality where NaN matches NaN."""
    if v1 is v2 or v1 == v2:
        return True

    return v1 != v1 and v2 != v2


def _check_values(original: Column, rewritten: Column) -> None:
    for i, (v1, v2) in enumerate(zip(original, rewritten)):
        if (v1 is None) != (v2 is None):
            _m = f'null mask differs at row {i}: {v1!r} -> {v2!r}'
            raise SchemaMismatchError(_m, column_name=original.name)
        if not _same_value(v1, v2):

            _m = f'value differs at row {i}: {v1!r} -> {v2!r}'
            raise SchemaMismatchError(_m, column_name=original.name)

    return None


def validate(original: Table, rewritten: Table) -> Diff:
    """Confirm `rewritten` is a lossless rewrite of `original`.

    Checks row counts, the column name sequence, null positions and present
    values of every column, and that every rewritten integer type contains
    the original bounds.

    Returns
    -------
    Diff
        Type/nullability changes, for audit by the caller.

    Raises
    ------
    SchemaMismatchError
        On the first violated invariant.
    """
    if original.row_count != rewritten.row_count:
        _m = (
            f'row count changed from {original.row_count} '
            f'to {rewritten.row_count}'
        )
        raise SchemaMismatchError(_m)

    stats = {
        c.name: range_analyzer.column_stats(c)
        for c in original.columns if c.logical_type.is_integer
    }
    diff = validate_schemas(original.schema, rewritten.schema, stats)
    for orig_column, new_column in zip(original.columns, rewritten.columns):
        _check_values(orig_column, new_column)

    log.debug(f'Validated {len(original.columns)} columns')
    return diff
