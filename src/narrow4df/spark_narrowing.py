"""
Narrowing of Spark DataFrames.

Spark marks columns nullable by default and `spark.read.csv` infers every
integer column as `LongType`. Both defaults pass through `schema_from_spark`
unchanged, only `narrow_df` rewrites the widths.
"""
from __future__ import annotations
import logging
from pyspark.sql import DataFrame, Column
from pyspark.sql import functions as F
from pyspark.sql import types as T

from narrow4df import narrowing, schema_inspector, schema_validator
from narrow4df.table import Table
from narrow4df.column import Column as NarrowColumn
from narrow4df.schema import Schema, Field
from narrow4df.common import LogicalType, NarrowingPolicy
from narrow4df.column_stats import ColumnStats
from narrow4df.schema_validator import Diff

log = logging.getLogger(__name__)

SPARK_TYPES: dict[LogicalType, T.DataType] = {
    LogicalType.INT8: T.ByteType(),
    LogicalType.INT16: T.ShortType(),
    LogicalType.INT32: T.IntegerType(),
    LogicalType.INT64: T.LongType(),
}
_LOGICAL_TYPES = {v.typeName(): k for k, v in SPARK_TYPES.items()}


def _col(name: str) -> Column:
    escaped = name.replace('`', '``')
    return F.col(f'`{escaped}`')


def logical_type_from_spark(data_type: T.DataType) -> LogicalType:
    return _LOGICAL_TYPES.get(data_type.typeName(), LogicalType.OTHER)


def schema_from_spark(struct: T.StructType) -> Schema:
    fields = []
    for struct_field in struct.fields:
        logical_type = logical_type_from_spark(struct_field.dataType)
        native_type = None
        if logical_type is LogicalType.OTHER:
            native_type = struct_field.dataType.simpleString()

        fields.append(Field(
            name=struct_field.name,
            logical_type=logical_type,
            nullable=struct_field.nullable,
            native_type=native_type,
        ))

    return Schema(tuple(fields))


def table_from_spark(df: DataFrame) -> Table:
    """Collects `df` to the driver, use on small DataFrames only."""
    schema = schema_from_spark(df.schema)
    rows = df.collect()
    return Table(tuple(
        NarrowColumn(
            name=field.name,
            logical_type=field.logical_type,
            nullable=field.nullable,
            values=tuple(row[i] for row in rows),
            native_type=field.native_type,
        )
        for i, field in enumerate(schema)
    ))


def compute_column_stats(
    df: DataFrame, columns: list[str]
) -> dict[str, ColumnStats]:
    """ColumnStats of `columns`, computed in a single aggregation."""
    aggregations = [F.count(F.lit(1)).alias('row_count')]
    for i, name in enumerate(columns):
        is_null = _col(name).isNull()
        aggregations.extend([
            F.min(_col(name)).alias(f'min_{i}'),
            F.max(_col(name)).alias(f'max_{i}'),
            F.count(F.when(is_null, F.lit(1))).alias(f'null_count_{i}'),
        ])

    row = df.agg(*aggregations).first()
    _m = f'Aggregation over {columns} returned no row'
    assert row is not None, _m
    return {
        name: ColumnStats(
            column_name=name,
            min_value=row[f'min_{i}'],
            max_value=row[f'max_{i}'],
            row_count=row['row_count'],
            null_count=row[f'null_count_{i}'],
        )
        for i, name in enumerate(columns)
    }


def narrow_df(
    df: DataFrame, policy: NarrowingPolicy | None = None
) -> tuple[DataFrame, Diff]:
    """Cast the integer columns of `df` to their narrowest Spark type.

    Nullability of a DataFrame column cannot be changed by a cast, so
    `policy.tighten_nullability` has no effect here.
    """
    if policy is None:
        policy = NarrowingPolicy()
    if policy.tighten_nullability:
        log.warning('`tighten_nullability` is ignored for DataFrames')

    schema = schema_from_spark(df.schema)
    integer_columns = schema_inspector.select_integer_fields(schema)
    columns = narrowing.resolve_columns(integer_columns, policy)
    stats = compute_column_stats(df, columns) if columns else {}

    casts = {}
    for name in columns:
        current_type = schema.field(name).logical_type
        target_type = narrowing.choose_type(current_type, stats[name], policy)
        if target_type != current_type:
            casts[name] = _col(name).cast(SPARK_TYPES[target_type])

    narrowed = df.withColumns(casts) if casts else df
    diff = schema_validator.validate_schemas(
        original=schema,
        rewritten=schema_from_spark(narrowed.schema),
        stats=stats,
    )
    for name, change in diff.changes.items():
        log.info(f'Narrowed `{name}`: {change}')

    return narrowed, diff
