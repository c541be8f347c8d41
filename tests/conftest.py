import pytest
import tempfile
from pyspark.sql import SparkSession
from delta import configure_spark_with_delta_pip

from narrow4df import Table, Column, LogicalType


@pytest.fixture
def spark():
    _catalog = 'org.apache.spark.sql.delta.catalog.DeltaCatalog'
    conf_map = {
        'spark.sql.shuffle.partitions': 4,
        'spark.driver.memory': '2g',
        'spark.sql.session.timeZone': 'UTC',
        'spark.sql.extensions': 'io.delta.sql.DeltaSparkSessionExtension',
        'spark.sql.catalog.spark_catalog': _catalog,
        'spark.ui.enabled': 'false',
    }
    builder = SparkSession.builder.config(map=conf_map).master('local[2]')
    configured_builder = configure_spark_with_delta_pip(
        builder, extra_packages=[]
    )
    return configured_builder.getOrCreate()


@pytest.fixture
def validated_table() -> Table:
    """Integer columns as inferred by a CSV reader: INT64, mostly nullable."""
    return Table([
        Column(
            name='subid',
            logical_type=LogicalType.OTHER,
            nullable=False,
            values=('s01', 's02', 's03', 's04', 's05'),
            native_type='string',
        ),
        Column(
            name='trial_num',
            logical_type=LogicalType.INT64,
            nullable=True,
            values=(0, 1, 2, 125, 127),
        ),
        Column(
            name='stimulus_num',
            logical_type=LogicalType.INT64,
            nullable=True,
            values=(-50000, 1000, None, 300, 7),
        ),
        Column(
            name='looking_time',
            logical_type=LogicalType.INT64,
            nullable=False,
            values=(2_147_483_648, 0, 1, 2, 3),
        ),
        Column(
            name='missing_code',
            logical_type=LogicalType.INT64,
            nullable=True,
            values=(None, None, None, None, None),
        ),
    ])


@pytest.fixture
def temp_dir() -> str:
    temp_dir = tempfile.TemporaryDirectory()
    yield temp_dir.name
    temp_dir.cleanup()
