from narrow4df.common import (
    LogicalType, INTEGER_TYPES, EmptyColumnPolicy, Compression,
    NarrowingPolicy, WriteOptions
)
from narrow4df.errors import ColumnOverflowError, SchemaMismatchError
from narrow4df.bounds import Bounds, EMPTY_BOUNDS
from narrow4df.column_stats import ColumnStats
from narrow4df.column import Column
from narrow4df.schema import Schema, Field
from narrow4df.table import Table

from narrow4df.schema_inspector import select_integer_columns
from narrow4df import range_analyzer
from narrow4df.type_selector import select_width
from narrow4df.column_rewriter import rewrite
from narrow4df.schema_validator import validate, Diff, ColumnChange
from narrow4df.narrowing import narrow

from narrow4df.storage import Storage, ArrowStorage, DeltaStorage
from narrow4df.arrow_narrowing import narrow_file
from narrow4df.spark_narrowing import narrow_df

from narrow4df import utils
