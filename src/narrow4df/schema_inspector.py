"""
Find the columns eligible for integer narrowing.

The declared nullability plays no part in the selection, a nullable column
without any null is a candidate like any other.
"""
from narrow4df.table import Table
from narrow4df.schema import Schema


def select_integer_fields(schema: Schema) -> list[str]:
    return [f.name for f in schema if f.logical_type.is_integer]


def select_integer_columns(table: Table) -> list[str]:
    """Names of the INT8..INT64 columns of `table`, in table order.

    Columns that are already at the narrowest width are included as well.
    """
    return select_integer_fields(table.schema)
