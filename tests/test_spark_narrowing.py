from pyspark.sql import SparkSession
from pyspark.sql import types as T

from narrow4df import LogicalType, NarrowingPolicy, EmptyColumnPolicy
from narrow4df import narrow, narrow_df
from narrow4df import spark_narrowing

input_schema = T.StructType([
    T.StructField('subid', T.StringType(), True),
    T.StructField('trial_num', T.LongType(), True),
    T.StructField('stimulus_num', T.LongType(), True),
    T.StructField('looking_time', T.LongType(), False),
    T.StructField('missing_code', T.LongType(), True),
])
input_rows = [
    ('s01', 0, -50000, 2_147_483_648, None),
    ('s02', 1, 1000, 0, None),
    ('s03', 2, None, 1, None),
    ('s04', 125, 300, 2, None),
    ('s05', 127, 7, 3, None),
]


def test_schema_from_spark() -> None:
    schema = spark_narrowing.schema_from_spark(input_schema)
    assert schema.column_types == {
        'subid': LogicalType.OTHER,
        'trial_num': LogicalType.INT64,
        'stimulus_num': LogicalType.INT64,
        'looking_time': LogicalType.INT64,
        'missing_code': LogicalType.INT64,
    }
    # Spark's nullable default passes through unchanged
    assert schema.field('trial_num').nullable
    assert not schema.field('looking_time').nullable
    assert schema.field('subid').native_type == 'string'


def test_compute_column_stats(spark: SparkSession) -> None:
    df = spark.createDataFrame(input_rows, schema=input_schema)
    stats = spark_narrowing.compute_column_stats(
        df, ['stimulus_num', 'missing_code']
    )
    assert stats['stimulus_num'].min_value == -50000
    assert stats['stimulus_num'].max_value == 1000
    assert stats['stimulus_num'].null_count == 1
    assert stats['stimulus_num'].row_count == 5
    assert stats['missing_code'].bounds.is_empty
    assert stats['missing_code'].null_count == 5


def test_narrow_df(spark: SparkSession) -> None:
    df = spark.createDataFrame(input_rows, schema=input_schema)
    narrowed_df, diff = narrow_df(df)

    column_types = {f.name: f.dataType for f in narrowed_df.schema.fields}
    assert column_types == {
        'subid': T.StringType(),
        'trial_num': T.ByteType(),
        'stimulus_num': T.IntegerType(),
        'looking_time': T.LongType(),
        'missing_code': T.ByteType(),
    }
    assert narrowed_df.collect() == df.collect()

    table, expected_diff = narrow(spark_narrowing.table_from_spark(df))
    assert diff == expected_diff
    assert spark_narrowing.table_from_spark(narrowed_df) == table


def test_narrow_df_preserve_empty(spark: SparkSession) -> None:
    df = spark.createDataFrame(input_rows, schema=input_schema)
    policy = NarrowingPolicy(empty_column=EmptyColumnPolicy.preserve)
    narrowed_df, diff = narrow_df(df, policy)
    assert 'missing_code' not in diff.changes
    assert narrowed_df.schema['missing_code'].dataType == T.LongType()


def test_narrow_df_without_integer_columns(spark: SparkSession) -> None:
    df = spark.createDataFrame([('a',)], schema='s string')
    narrowed_df, diff = narrow_df(df)
    assert diff.is_empty
    assert narrowed_df is df
