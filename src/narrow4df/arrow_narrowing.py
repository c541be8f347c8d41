"""
Narrowing of Arrow files with bounded memory.

The source file is read twice, one record batch at a time: the first pass
collects ColumnStats, the second casts the integer columns and streams the
batches to the target. The target is written to a temporary file next to
it and only moved in place after every check passed.
"""
from __future__ import annotations
import os
import logging
import tempfile
from pathlib import Path
from collections.abc import Iterator
import pyarrow as pa
import pyarrow.compute as pc

from narrow4df import narrowing, schema_inspector, schema_validator
from narrow4df.bounds import Bounds
from narrow4df.common import NarrowingPolicy, WriteOptions
from narrow4df.column_stats import ColumnStats
from narrow4df.errors import ColumnOverflowError, SchemaMismatchError
from narrow4df.range_analyzer import BoundsAccumulator
from narrow4df.schema_validator import Diff
from narrow4df.storage.arrow_storage import (
    ArrowStorage, ARROW_TYPES, field_from_arrow, schema_from_arrow
)

log = logging.getLogger(__name__)


def array_bounds(array: pa.Array | pa.ChunkedArray) -> Bounds:
    """Bounds of the present values, all-null and empty arrays are EMPTY."""
    min_max = pc.min_max(array)
    return Bounds(
        min_value=min_max['min'].as_py(), max_value=min_max['max'].as_py()
    )


def collect_column_stats(
    storage: ArrowStorage, path: str | Path, columns: list[str]
) -> dict[str, ColumnStats]:
    accumulators = {name: BoundsAccumulator() for name in columns}
    for batch in storage.iter_batches(path):
        for name, accumulator in accumulators.items():
            array = batch.column(name)
            accumulator.merge(
                array_bounds(array),
                row_count=len(array),
                null_count=array.null_count,
            )

    return {
        name: accumulator.to_column_stats(name)
        for name, accumulator in accumulators.items()
    }


def build_target_schema(
    source_schema: pa.Schema,
    stats: dict[str, ColumnStats],
    policy: NarrowingPolicy,
) -> pa.Schema:
    target_fields = []
    for arrow_field in source_schema:
        if arrow_field.name not in stats:
            target_fields.append(arrow_field)
            continue

        column_stats = stats[arrow_field.name]
        field = field_from_arrow(arrow_field)
        target_type = narrowing.choose_type(
            field.logical_type, column_stats, policy
        )
        nullable = narrowing.choose_nullable(
            field.nullable, column_stats, policy
        )
        target_fields.append(pa.field(
            arrow_field.name,
            ARROW_TYPES[target_type],
            nullable=nullable,
            metadata=arrow_field.metadata,
        ))

    return pa.schema(target_fields, metadata=source_schema.metadata)


def _cast_array(
    name: str, array: pa.Array, target_field: pa.Field
) -> pa.Array:
    if array.type == target_field.type:
        return array

    try:
        narrowed = pc.cast(array, target_field.type, safe=True)
    except pa.ArrowInvalid as e:
        bounds = array_bounds(array)
        logical_type = field_from_arrow(target_field).logical_type
        value = bounds.max_value
        if not logical_type.contains(bounds.min_value):
            value = bounds.min_value
        raise ColumnOverflowError(
            column_name=name, value=value, logical_type=logical_type
        ) from e

    if narrowed.null_count != array.null_count:
        _m = (
            f'null count changed from {array.null_count} '
            f'to {narrowed.null_count}'
        )
        raise SchemaMismatchError(_m, column_name=name)

    return narrowed


def cast_batches(
    storage: ArrowStorage, path: str | Path, target_schema: pa.Schema
) -> Iterator[pa.RecordBatch]:
    for batch in storage.iter_batches(path):
        arrays = [
            _cast_array(target_field.name, array, target_field)
            for array, target_field in zip(batch.columns, target_schema)
        ]
        yield pa.RecordBatch.from_arrays(arrays, schema=target_schema)


def narrow_file(
    source: str | Path,
    target: str | Path,
    policy: NarrowingPolicy | None = None,
    options: WriteOptions | None = None,
    storage: ArrowStorage | None = None,
) -> Diff:
    """Narrow the integer columns of the Arrow file `source` into `target`.

    Parameters
    ----------
    source
        Arrow IPC file to read, it is never modified.
    target
        Arrow IPC file to write, replaced only on success.
    policy
        Narrowing options, the defaults of `NarrowingPolicy` when `None`.
    options
        Write options e.g. the compression codec of `target`.
    storage
        ArrowStorage used for reading and writing.

    Returns
    -------
    Diff
        Type/nullability changes of the narrowed columns.
    """
    if policy is None:
        policy = NarrowingPolicy()
    if storage is None:
        storage = ArrowStorage()

    source_arrow_schema = storage.read_arrow_schema(source)
    source_schema = schema_from_arrow(source_arrow_schema)
    integer_columns = schema_inspector.select_integer_fields(source_schema)
    columns = narrowing.resolve_columns(integer_columns, policy)

    stats = collect_column_stats(storage, source, columns)
    target_arrow_schema = build_target_schema(
        source_arrow_schema, stats, policy
    )
    diff = schema_validator.validate_schemas(
        original=source_schema,
        rewritten=schema_from_arrow(target_arrow_schema),
        stats=stats,
    )

    target = Path(target)
    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f'.{target.name}.', suffix='.tmp'
    )
    os.close(fd)
    try:
        row_count = storage.write_batches(
            path=tmp_name,
            arrow_schema=target_arrow_schema,
            batches=cast_batches(storage, source, target_arrow_schema),
            options=options,
        )
        expected_row_counts = {s.row_count for s in stats.values()}
        if len(expected_row_counts) == 1 and \
                row_count not in expected_row_counts:
            _m = (
                f'row count changed from {expected_row_counts.pop()} '
                f'to {row_count}'
            )
            raise SchemaMismatchError(_m)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    for name, change in diff.changes.items():
        log.info(f'Narrowed `{name}`: {change}')
    source_size = Path(source).stat().st_size
    target_size = target.stat().st_size
    log.info(
        f'Narrowed {source} ({source_size} bytes) '
        f'into {target} ({target_size} bytes)'
    )
    return diff
