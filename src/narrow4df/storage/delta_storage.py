from __future__ import annotations
import logging
import functools
from typing import Any, Callable
from dataclasses import dataclass
from pyspark.sql import SparkSession, DataFrame

from narrow4df.table import Table
from narrow4df.common import NarrowingPolicy
from narrow4df.schema_validator import Diff
from narrow4df import spark_narrowing

TABLE_FORMAT = 'delta'
log = logging.getLogger(__name__)


def fill_in_spark_session(func: Callable[..., Any]) -> Callable[..., Any]:

    @functools.wraps(func)
    def _wrapper(*args, **kwargs) -> Any:
        no_spark_in_args = len(args) < 2
        no_spark_in_kwargs = kwargs.get('spark') is None
        if no_spark_in_args and no_spark_in_kwargs:
            spark = SparkSession.getActiveSession()
            _m = f'Provide SparkSession to {func.__name__}'
            assert spark is not None, _m
            kwargs['spark'] = spark
        elif not no_spark_in_args:
            _m = 'First positional argument is not a SparkSession!'
            assert isinstance(args[1], SparkSession), _m
        elif not no_spark_in_kwargs:
            _m = 'Argument `spark` must be a SparkSession!'
            assert isinstance(kwargs.get('spark'), SparkSession), _m

        return func(*args, **kwargs)

    return _wrapper


@dataclass(frozen=True, kw_only=True)
class DeltaStorage:
    """Delta table at `location`, read and written through Spark.

    Narrowing rewrites the table as a new Delta version, older versions stay
    readable through time travel until vacuumed.
    """
    location: str

    @fill_in_spark_session
    def build_batch_df(
        self,
        spark: SparkSession | None = None,
        options: dict[str, Any] | None = None,
    ) -> DataFrame:
        assert spark is not None  # filled by the decorator
        reader = spark.read.format(TABLE_FORMAT)
        if options is not None:
            reader = reader.options(**options)
        return reader.load(self.location)

    @fill_in_spark_session
    def read_table(self, spark: SparkSession | None = None) -> Table:
        """Collects the whole table, use on small tables only."""
        df = self.build_batch_df(spark)
        return spark_narrowing.table_from_spark(df)

    def write_df(
        self,
        df: DataFrame,
        mode: str = 'overwrite',
        overwrite_schema: bool = False,
    ) -> None:
        writer = (
            df.write
            .format(TABLE_FORMAT)
            .mode(mode)
            .option('overwriteSchema', overwrite_schema)
        )
        writer.save(self.location)
        return None

    @fill_in_spark_session
    def narrow_table(
        self,
        spark: SparkSession | None = None,
        policy: NarrowingPolicy | None = None,
    ) -> Diff:
        """Rewrite the table with its integer columns narrowed.

        Nothing is written when no column type changes.
        """
        df = self.build_batch_df(spark)
        narrowed, diff = spark_narrowing.narrow_df(df, policy=policy)
        if diff.is_empty:
            log.info(f'Nothing to narrow in {self.location}')
            return diff

        self.write_df(narrowed, mode='overwrite', overwrite_schema=True)
        log.info(f'Narrowed {self.location}\n{diff}')
        return diff
