from typing import Protocol
from pathlib import Path

from narrow4df.table import Table
from narrow4df.schema import Schema
from narrow4df.common import WriteOptions


class Storage(Protocol):
    """Reads/writes a `Table` from/to a columnar file.

    Reading returns the table exactly as the producer described it, no
    narrowing or nullability change happens on read.
    """

    def read(self, path: str | Path) -> Table:
        ...

    def read_schema(self, path: str | Path) -> Schema:
        """Reads only the schema, without touching the data."""
        ...

    def write(
        self,
        path: str | Path,
        table: Table,
        options: WriteOptions | None = None,
    ) -> None:
        ...
