"""
Arrow IPC file (Feather v2) storage.

The Arrow file format is written by pyarrow, the R `arrow` package
(`write_feather`) and Arrow.jl among others. Each producer has its own
defaults, e.g. R marks every column nullable and writes integers as int32,
those are kept as they are on read.
"""
from __future__ import annotations
import logging
from pathlib import Path
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
import pyarrow as pa
import pyarrow.ipc

from narrow4df.table import Table
from narrow4df.column import Column
from narrow4df.schema import Schema, Field
from narrow4df.common import LogicalType, WriteOptions, Compression
from narrow4df.storage.storage import Storage

log = logging.getLogger(__name__)

ARROW_TYPES: dict[LogicalType, pa.DataType] = {
    LogicalType.INT8: pa.int8(),
    LogicalType.INT16: pa.int16(),
    LogicalType.INT32: pa.int32(),
    LogicalType.INT64: pa.int64(),
}
_LOGICAL_TYPES = {v: k for k, v in ARROW_TYPES.items()}


def logical_type_from_arrow(arrow_type: pa.DataType) -> LogicalType:
    """Signed integers map to their width, anything else to OTHER."""
    return _LOGICAL_TYPES.get(arrow_type, LogicalType.OTHER)


def arrow_type_from_field(field: Field) -> pa.DataType:
    if field.logical_type.is_integer:
        return ARROW_TYPES[field.logical_type]

    if isinstance(field.native_type, pa.DataType):
        return field.native_type

    try:
        return pa.type_for_alias(field.native_type)
    except ValueError as e:
        _m = (
            f'Column `{field.name}`: cannot write Arrow type '
            f'`{field.native_type}` from a Table'
        )
        raise ValueError(_m) from e


def field_from_arrow(arrow_field: pa.Field) -> Field:
    """Carries the Arrow type of non-integer fields as is."""
    logical_type = logical_type_from_arrow(arrow_field.type)
    native_type = None
    if logical_type is LogicalType.OTHER:
        native_type = arrow_field.type

    return Field(
        name=arrow_field.name,
        logical_type=logical_type,
        nullable=arrow_field.nullable,
        native_type=native_type,
    )


def schema_from_arrow(arrow_schema: pa.Schema) -> Schema:
    return Schema(tuple(field_from_arrow(f) for f in arrow_schema))


def schema_to_arrow(schema: Schema) -> pa.Schema:
    return pa.schema([
        pa.field(f.name, arrow_type_from_field(f), nullable=f.nullable)
        for f in schema
    ])


def table_from_arrow(arrow_table: pa.Table) -> Table:
    schema = schema_from_arrow(arrow_table.schema)
    return Table(tuple(
        Column(
            name=field.name,
            logical_type=field.logical_type,
            nullable=field.nullable,
            values=tuple(arrow_table.column(i).to_pylist()),
            native_type=field.native_type,
        )
        for i, field in enumerate(schema)
    ))


def table_to_arrow(table: Table) -> pa.Table:
    arrow_schema = schema_to_arrow(table.schema)
    arrays = [
        pa.array(column.values, type=arrow_field.type)
        for column, arrow_field in zip(table.columns, arrow_schema)
    ]
    return pa.Table.from_arrays(arrays, schema=arrow_schema)


def build_ipc_options(options: WriteOptions | None) -> pa.ipc.IpcWriteOptions:
    if options is None or options.compression == Compression.none:
        return pa.ipc.IpcWriteOptions(compression=None)

    return pa.ipc.IpcWriteOptions(compression=options.compression.value)


@dataclass(frozen=True, kw_only=True)
class ArrowStorage(Storage):
    """Arrow IPC file storage.

    Parameters
    ----------
    memory_map
        Memory-map files on read. Reading an uncompressed file is then
        nearly free, compressed buffers are decompressed batch by batch.
    """
    memory_map: bool = True

    def _open_source(self, path: str | Path) -> pa.NativeFile:
        if self.memory_map:
            return pa.memory_map(str(path), 'r')

        return pa.OSFile(str(path), 'rb')

    def read_schema(self, path: str | Path) -> Schema:
        return schema_from_arrow(self.read_arrow_schema(path))

    def read_arrow_schema(self, path: str | Path) -> pa.Schema:
        with self._open_source(path) as source:
            return pa.ipc.open_file(source).schema

    def iter_batches(self, path: str | Path) -> Iterator[pa.RecordBatch]:
        """Lazily yields the record batches of the file, one at a time."""
        with self._open_source(path) as source:
            reader = pa.ipc.open_file(source)
            for i in range(reader.num_record_batches):
                yield reader.get_batch(i)

    def read_arrow(self, path: str | Path) -> pa.Table:
        with self._open_source(path) as source:
            return pa.ipc.open_file(source).read_all()

    def read(self, path: str | Path) -> Table:
        return table_from_arrow(self.read_arrow(path))

    def write_batches(
        self,
        path: str | Path,
        arrow_schema: pa.Schema,
        batches: Iterable[pa.RecordBatch],
        options: WriteOptions | None = None,
    ) -> int:
        """Streams `batches` to `path`, returns the number of rows written."""
        row_count = 0
        ipc_options = build_ipc_options(options)
        with pa.OSFile(str(path), 'wb') as sink:
            with pa.ipc.new_file(
                sink, arrow_schema, options=ipc_options
            ) as writer:
                for batch in batches:
                    writer.write_batch(batch)
                    row_count += batch.num_rows

        return row_count

    def write(
        self,
        path: str | Path,
        table: Table,
        options: WriteOptions | None = None,
    ) -> None:
        arrow_table = table_to_arrow(table)
        row_count = self.write_batches(
            path=path,
            arrow_schema=arrow_table.schema,
            batches=arrow_table.to_batches(),
            options=options,
        )
        log.info(f'Wrote {row_count} rows to {path}')
        return None
