from __future__ import annotations
import difflib
import functools
from collections.abc import Iterable
from dataclasses import dataclass

from narrow4df.column import Column
from narrow4df.schema import Schema


@dataclass(frozen=True, kw_only=False)
class Table:
    """Ordered sequence of named columns sharing one row count.

    Examples
    --------
    >>> from narrow4df import Table, Column, LogicalType
    >>> table = Table([
    ...     Column(name='id', logical_type=LogicalType.INT64,
    ...            nullable=True, values=(1, 2, None)),
    ... ])
    >>> table.row_count
    3
    """
    columns: tuple[Column, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.columns, tuple):
            object.__setattr__(self, 'columns', tuple(self.columns))

        # Validates the column names
        _ = self.schema

        row_counts = {c.name: c.row_count for c in self.columns}
        _m = f'Columns must share one row count, got {row_counts}'
        assert len(set(row_counts.values())) <= 1, _m

    @property
    def row_count(self) -> int:
        if len(self.columns) == 0:
            return 0

        return self.columns[0].row_count

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @functools.cached_property
    def schema(self) -> Schema:
        return Schema.from_table(self)

    @functools.cached_property
    def _columns_dict(self) -> dict[str, Column]:
        return {c.name: c for c in self.columns}

    def column(self, name: str) -> Column:
        if name not in self._columns_dict:
            closest = difflib.get_close_matches(
                word=name, possibilities=self.column_names, n=3, cutoff=0
            )
            _m = f'Cannot find column `{name}`. Did you mean one of {closest}?'
            raise KeyError(_m)

        return self._columns_dict[name]

    def with_columns(self, columns: Iterable[Column]) -> Table:
        """Returns a new Table with the given columns replaced by name."""
        replacements = {c.name: c for c in columns}
        unknown = [n for n in replacements if n not in self._columns_dict]
        _m = f'Cannot replace unknown columns: {unknown}'
        assert len(unknown) == 0, _m
        return Table(tuple(
            replacements.get(c.name, c) for c in self.columns
        ))
