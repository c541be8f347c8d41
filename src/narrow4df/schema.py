from __future__ import annotations
import difflib
import functools
from typing import Any, TYPE_CHECKING
from collections.abc import Iterator
from dataclasses import dataclass

from narrow4df.common import LogicalType

if TYPE_CHECKING:
    from narrow4df.table import Table


@dataclass(frozen=True, kw_only=True)
class Field:
    name: str
    logical_type: LogicalType
    nullable: bool
    native_type: Any = None

    @property
    def type_name(self) -> str:
        if self.logical_type is LogicalType.OTHER:
            return str(self.native_type)

        return self.logical_type.name


@dataclass(frozen=True, kw_only=False)
class Schema:
    """Ordered <column_name>:(<logical_type>, <nullable>) mapping.

    Derived from a `Table` (see `Schema.from_table`) or imported from another
    producer, never edited by hand.
    """
    fields: tuple[Field, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.fields, tuple):
            object.__setattr__(self, 'fields', tuple(self.fields))

        duplicates = sorted({n for n in self.names if self.names.count(n) > 1})
        _m = f'Duplicate column names: {duplicates}'
        assert len(duplicates) == 0, _m

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    @functools.cached_property
    def _fields_dict(self) -> dict[str, Field]:
        return {f.name: f for f in self.fields}

    @functools.cached_property
    def column_types(self) -> dict[str, LogicalType]:
        """<column_name>:<logical_type> mapping."""
        return {f.name: f.logical_type for f in self.fields}

    def field(self, name: str) -> Field:
        if name not in self._fields_dict:
            closest = difflib.get_close_matches(
                word=name, possibilities=self.names, n=3, cutoff=0
            )
            _m = f'Cannot find column `{name}`. Did you mean one of {closest}?'
            raise KeyError(_m)

        return self._fields_dict[name]

    @staticmethod
    def from_table(table: Table) -> Schema:
        return Schema(tuple(
            Field(
                name=c.name,
                logical_type=c.logical_type,
                nullable=c.nullable,
                native_type=c.native_type,
            )
            for c in table.columns
        ))
