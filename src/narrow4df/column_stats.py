from dataclasses import dataclass
from narrow4df.bounds import Bounds


@dataclass(frozen=True, kw_only=True)
class ColumnStats:
    column_name: str
    min_value: int | None
    max_value: int | None
    row_count: int
    null_count: int

    @property
    def bounds(self) -> Bounds:
        return Bounds(min_value=self.min_value, max_value=self.max_value)

    @property
    def has_nulls(self) -> bool:
        return self.null_count > 0
