from typing import Any
from narrow4df.common import LogicalType


class ColumnOverflowError(OverflowError):
    """A present value does not fit the logical type selected for it."""

    def __init__(
        self, column_name: str, value: Any, logical_type: LogicalType
    ) -> None:
        self.column_name = column_name
        self.value = value
        self.logical_type = logical_type
        _m = (
            f'Column `{column_name}`: value {value} does not fit '
            f'{logical_type.name}'
        )
        if logical_type.is_integer:
            _range = f'[{logical_type.type_min}, {logical_type.type_max}]'
            _m = f'{_m} {_range}'

        super().__init__(_m)


class SchemaMismatchError(Exception):
    """The rewritten table violates an invariant of the original one."""

    def __init__(self, reason: str, column_name: str | None = None) -> None:
        self.column_name = column_name
        self.reason = reason
        _m = reason
        if column_name is not None:
            _m = f'Column `{column_name}`: {reason}'

        super().__init__(_m)
