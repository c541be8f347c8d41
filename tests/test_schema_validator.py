import pytest
from narrow4df import Table, Column, LogicalType, SchemaMismatchError
from narrow4df import ColumnStats, Schema, Field
from narrow4df.schema_validator import validate, validate_schemas


def _int_column(
    name: str,
    values: tuple,
    logical_type: LogicalType = LogicalType.INT64,
    nullable: bool = True,
) -> Column:
    return Column(
        name=name, logical_type=logical_type, nullable=nullable, values=values
    )


def test_validate_returns_diff() -> None:
    original = Table([
        _int_column('a', (1, None, 3)),
        _int_column('b', (1, 2, 3), logical_type=LogicalType.INT8),
    ])
    rewritten = Table([
        _int_column('a', (1, None, 3), logical_type=LogicalType.INT8),
        _int_column('b', (1, 2, 3), logical_type=LogicalType.INT8),
    ])
    diff = validate(original, rewritten)
    assert diff.as_dict() == {'a': ('INT64', 'INT8')}
    assert str(diff) == 'Changes:\na INT64 -> INT8'


def test_validate_unchanged() -> None:
    table = Table([_int_column('a', (1, 2))])
    diff = validate(table, table)
    assert diff.is_empty
    assert str(diff) == 'No changes.'


def test_row_count_mismatch() -> None:
    original = Table([_int_column('a', (1, 2))])
    rewritten = Table([_int_column('a', (1,))])
    with pytest.raises(SchemaMismatchError, match='row count'):
        validate(original, rewritten)


def test_column_order_mismatch() -> None:
    original = Table([_int_column('a', (1,)), _int_column('b', (2,))])
    rewritten = Table([_int_column('b', (2,)), _int_column('a', (1,))])
    with pytest.raises(SchemaMismatchError, match='column sequence'):
        validate(original, rewritten)


def test_null_mask_mismatch() -> None:
    original = Table([_int_column('a', (1, None))])
    rewritten = Table([_int_column('a', (1, 0))])
    with pytest.raises(SchemaMismatchError) as e:
        validate(original, rewritten)
    assert e.value.column_name == 'a'
    assert 'null mask' in e.value.reason


def test_value_mismatch() -> None:
    original = Table([_int_column('a', (1, 2))])
    rewritten = Table([_int_column('a', (1, 3))])
    with pytest.raises(SchemaMismatchError, match='value differs at row 1'):
        validate(original, rewritten)


def test_nan_values_match() -> None:
    def _double_column(values: tuple) -> Column:
        return Column(
            name='f', logical_type=LogicalType.OTHER, nullable=True,
            values=values, native_type='double',
        )

    original = Table([_double_column((float('nan'), 1.0, None))])
    rewritten = Table([_double_column((float('nan'), 1.0, None))])
    assert validate(original, rewritten).is_empty

    rewritten = Table([_double_column((1.0, 1.0, None))])
    with pytest.raises(SchemaMismatchError, match='value differs at row 0'):
        validate(original, rewritten)



def test_other_type_change() -> None:
    original = Table([Column(
        name='s', logical_type=LogicalType.OTHER, nullable=True,
        values=('x',), native_type='string',
    )])
    rewritten = Table([Column(
        name='s', logical_type=LogicalType.OTHER, nullable=True,
        values=('x',), native_type='large_string',
    )])
    with pytest.raises(SchemaMismatchError, match='large_string'):
        validate(original, rewritten)


def test_bounds_not_contained() -> None:
    original = Schema((
        Field(name='a', logical_type=LogicalType.INT64, nullable=True),
    ))
    rewritten = Schema((
        Field(name='a', logical_type=LogicalType.INT8, nullable=True),
    ))
    stats = {'a': ColumnStats(
        column_name='a', min_value=0, max_value=300,
        row_count=10, null_count=0,
    )}
    with pytest.raises(SchemaMismatchError, match='do not fit INT8'):
        validate_schemas(original, rewritten, stats)


def test_nulls_in_non_nullable() -> None:
    original = Schema((
        Field(name='a', logical_type=LogicalType.INT64, nullable=True),
    ))
    rewritten = Schema((
        Field(name='a', logical_type=LogicalType.INT8, nullable=False),
    ))
    stats = {'a': ColumnStats(
        column_name='a', min_value=0, max_value=1,
        row_count=10, null_count=2,
    )}
    with pytest.raises(SchemaMismatchError, match='non-nullable'):
        validate_schemas(original, rewritten, stats)


def test_nullability_change_in_diff() -> None:
    original = Table([_int_column('a', (1, 2))])
    rewritten = Table([
        _int_column('a', (1, 2), logical_type=LogicalType.INT8, nullable=False)
    ])
    diff = validate(original, rewritten)
    change = diff.changes['a']
    assert change.old_nullable and not change.new_nullable
    assert str(change) == 'INT64 -> INT8, nullable True -> False'
