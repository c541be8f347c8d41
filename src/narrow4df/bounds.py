from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class Bounds:
    """Inclusive (min, max) of the present values of a column.

    Both ends are `None` for a column without present values, see
    `EMPTY_BOUNDS`.

    Examples
    --------
    >>> from narrow4df.bounds import Bounds, EMPTY_BOUNDS
    >>> Bounds(min_value=-3, max_value=7).merge(EMPTY_BOUNDS)
    Bounds(min_value=-3, max_value=7)
    """
    min_value: int | None
    max_value: int | None

    def __post_init__(self) -> None:
        ends = (self.min_value, self.max_value)
        _m = f'Bounds must be both set or both empty, got {ends}'
        assert (self.min_value is None) == (self.max_value is None), _m
        if not self.is_empty:
            _m = f'`min_value` > `max_value` in {ends}'
            assert self.min_value <= self.max_value, _m

    @property
    def is_empty(self) -> bool:
        return self.min_value is None

    def merge(self, other: Bounds) -> Bounds:
        if self.is_empty:
            return other
        if other.is_empty:
            return self

        return Bounds(
            min_value=min(self.min_value, other.min_value),
            max_value=max(self.max_value, other.max_value),
        )


EMPTY_BOUNDS = Bounds(min_value=None, max_value=None)
