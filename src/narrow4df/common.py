"""
Commonly used classes, enums and policies.
"""
from __future__ import annotations
from enum import Enum
from dataclasses import dataclass


class LogicalType(Enum):
    """Logical column type.

    The signed integer family is ordered from the narrowest to the widest
    width. `OTHER` tags every column outside this family, such columns are
    carried through unchanged.
    """
    INT8 = 8
    INT16 = 16
    INT32 = 32
    INT64 = 64
    OTHER = 0

    def __repr__(self) -> str:
        # Keeps `repr(schema)` valid Python, see `utils.format_schema`
        return f'{type(self).__name__}.{self.name}'

    @property
    def is_integer(self) -> bool:
        return self is not LogicalType.OTHER

    @property
    def bit_width(self) -> int:
        _m = f'`{self.name}` has no bit width!'
        assert self.is_integer, _m
        return self.value

    @property
    def type_min(self) -> int:
        return -(2 ** (self.bit_width - 1))

    @property
    def type_max(self) -> int:
        return 2 ** (self.bit_width - 1) - 1

    def contains(self, value: int) -> bool:
        return self.type_min <= value <= self.type_max


INTEGER_TYPES: tuple[LogicalType, ...] = (
    LogicalType.INT8,
    LogicalType.INT16,
    LogicalType.INT32,
    LogicalType.INT64,
)


class EmptyColumnPolicy(Enum):
    """What to do with integer columns that hold no present values."""
    narrowest = 1  # INT8
    preserve = 2   # keep the original width


class Compression(Enum):
    none = 'none'
    lz4 = 'lz4'
    zstd = 'zstd'


@dataclass(frozen=True, kw_only=True)
class NarrowingPolicy:
    """Configures the narrowing pipeline.

    Parameters
    ----------
    empty_column
        Target width for all-null integer columns.
    tighten_nullability
        Mark narrowed columns without any observed null as non-nullable.
        Producers like R mark every column nullable, reading such a table
        never changes the flag, only this explicit option does.
    columns
        Restrict narrowing to these integer columns. All integer columns are
        narrowed when `None`.
    """
    empty_column: EmptyColumnPolicy = EmptyColumnPolicy.narrowest
    tighten_nullability: bool = False
    columns: tuple[str, ...] | None = None


@dataclass(frozen=True, kw_only=True)
class WriteOptions:
    compression: Compression = Compression.none
