from pathlib import Path
from pyspark.sql import SparkSession
from pyspark.sql import types as T

from narrow4df import DeltaStorage, LogicalType


def test_narrow_table(spark: SparkSession, temp_dir: str) -> None:
    location = Path(temp_dir, 'validated.delta').as_uri()
    storage = DeltaStorage(location=location)
    df = spark.createDataFrame(
        [(1, 'a', 40_000), (2, None, None), (3, 'c', -5)],
        schema='id long, label string, score long',
    )
    storage.write_df(df)

    diff = storage.narrow_table(spark)
    assert diff.as_dict() == {
        'id': ('INT64', 'INT8'),
        'score': ('INT64', 'INT32'),
    }

    narrowed_df = storage.build_batch_df(spark)
    assert narrowed_df.schema['id'].dataType == T.ByteType()
    assert narrowed_df.schema['score'].dataType == T.IntegerType()
    assert sorted(narrowed_df.collect()) == sorted(df.collect())

    table = storage.read_table(spark)
    assert table.column('score').logical_type == LogicalType.INT32

    # Narrowing again has nothing left to do
    assert storage.narrow_table(spark).is_empty


def test_build_batch_df_uses_active_session(
    spark: SparkSession, temp_dir: str
) -> None:
    location = Path(temp_dir, 'small.delta').as_uri()
    storage = DeltaStorage(location=location)
    storage.write_df(spark.createDataFrame([(1,)], schema='id long'))
    assert storage.build_batch_df().count() == 1
