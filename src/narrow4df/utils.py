"""
Commonly used functions.
"""
import dataclasses
from black import format_str, FileMode

from narrow4df.schema import Schema


def prettify_schema(schema: Schema) -> str:
    prefixes = [
        f'{i + 1}. {field.name}' for i, field in enumerate(schema.fields)
    ]
    if len(prefixes) == 0:
        return 'Schema: (empty)'

    _pad = max([len(c) for c in prefixes])
    rows = ['Schema:']
    rows.extend([
        f'{p.ljust(_pad)} {field.type_name}'
        + ('' if field.nullable else ' NOT NULL')
        for p, field in zip(prefixes, schema.fields)
    ])
    return '\n'.join(rows)


def format_schema(schema: Schema, single_quotes: bool = True) -> str:
    # Producer type objects do not repr as valid Python, show their names
    named = Schema(tuple(
        dataclasses.replace(f, native_type=f.type_name)
        if f.native_type is not None else f
        for f in schema
    ))
    fixed = format_str(repr(named), mode=FileMode())
    if single_quotes:
        return fixed.replace('"', "'")
    else:
        return fixed
