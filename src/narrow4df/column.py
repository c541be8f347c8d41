from __future__ import annotations
from typing import Any
from collections.abc import Iterator
from dataclasses import dataclass

from narrow4df.common import LogicalType
from narrow4df.errors import ColumnOverflowError


@dataclass(frozen=True, kw_only=True)
class Column:
    """Named, fixed length sequence of values tagged with a logical type.

    `None` marks a null position. Columns are immutable, any rewrite builds a
    new instance.

    Parameters
    ----------
    name
        Column name, unique within a table.
    logical_type
        One of the integer types, or `LogicalType.OTHER` for columns that
        are only carried through.
    nullable
        Schema level flag. A non-nullable column cannot hold `None`, a
        nullable one is not required to.
    values
        Column values, stored as a tuple.
    native_type
        Producer type of an `OTHER` column. Either the producer's own type
        object e.g. `pa.timestamp('us', tz='UTC')`, or its name e.g.
        'string'.
    """
    name: str
    logical_type: LogicalType
    nullable: bool
    values: tuple[Any, ...]
    native_type: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, 'values', tuple(self.values))

        if self.logical_type is LogicalType.OTHER:
            _m = f'Column `{self.name}`: `native_type` is required for OTHER'
            assert self.native_type is not None, _m
        else:
            _m = f'Column `{self.name}`: `native_type` is only for OTHER'
            assert self.native_type is None, _m

        for value in self.values:
            if value is None:
                if not self.nullable:
                    _m = f'Column `{self.name}` is not nullable but has nulls!'
                    raise ValueError(_m)
                continue

            if not self.logical_type.is_integer:
                continue

            if isinstance(value, bool) or not isinstance(value, int):
                _m = (
                    f'Column `{self.name}`: expected int, '
                    f'got {type(value).__name__}'
                )
                raise TypeError(_m)

            if not self.logical_type.contains(value):
                raise ColumnOverflowError(
                    column_name=self.name,
                    value=value,
                    logical_type=self.logical_type,
                )

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    @property
    def row_count(self) -> int:
        return len(self.values)

    @property
    def null_positions(self) -> frozenset[int]:
        return frozenset(i for i, v in enumerate(self.values) if v is None)
