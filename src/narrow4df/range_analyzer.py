from __future__ import annotations
from collections.abc import Iterable

from narrow4df.bounds import Bounds, EMPTY_BOUNDS
from narrow4df.column import Column
from narrow4df.column_stats import ColumnStats


class BoundsAccumulator:
    """Running min/max/count state over a single pass of values.

    Values can be fed one by one (`update`) or as precomputed bounds of a
    chunk (`merge`), e.g. one Arrow record batch at a time.
    """

    def __init__(self) -> None:
        self.min_value: int | None = None
        self.max_value: int | None = None
        self.row_count = 0
        self.null_count = 0

    def update(self, value: int | None) -> None:
        self.row_count += 1
        if value is None:
            self.null_count += 1
            return None

        if self.min_value is None:
            self.min_value = value
            self.max_value = value
        elif value < self.min_value:
            self.min_value = value
        elif value > self.max_value:
            self.max_value = value

        return None

    def merge(self, bounds: Bounds, row_count: int, null_count: int) -> None:
        merged = self.bounds.merge(bounds)
        self.min_value = merged.min_value
        self.max_value = merged.max_value
        self.row_count += row_count
        self.null_count += null_count
        return None

    @property
    def bounds(self) -> Bounds:
        if self.min_value is None:
            return EMPTY_BOUNDS

        return Bounds(min_value=self.min_value, max_value=self.max_value)

    def to_column_stats(self, column_name: str) -> ColumnStats:
        return ColumnStats(
            column_name=column_name,
            min_value=self.min_value,
            max_value=self.max_value,
            row_count=self.row_count,
            null_count=self.null_count,
        )


def _scan(values: Iterable[int | None]) -> BoundsAccumulator:
    accumulator = BoundsAccumulator()
    for value in values:
        accumulator.update(value)

    return accumulator


def bounds(values: Column | Iterable[int | None]) -> Bounds:
    """Inclusive bounds of the present values, `EMPTY_BOUNDS` if none.

    `values` is consumed exactly once, so any finite iterator works. The
    nullable flag of a `Column` is not consulted.
    """
    return _scan(values).bounds


def column_stats(
    values: Column | Iterable[int | None], column_name: str | None = None
) -> ColumnStats:
    if column_name is None:
        _m = '`column_name` is required unless a Column is given'
        assert isinstance(values, Column), _m
        column_name = values.name

    return _scan(values).to_column_stats(column_name)
