"""Tests for the RelationalStore adapter."""
import pytest
from csvchat.domain.exceptions import (
    IngestError,
    QueryError,
    StoreInitError,
    StoreNotReadyError,
)
from csvchat.infra.db.store import RelationalStore
from csvchat.ingest.schema import build_table_definition

SALES = [
    {"region": "west", "amount": 10},
    {"region": "east", "amount": 25},
]


def _load_sales(store: RelationalStore) -> None:
    definition = build_table_definition("sales", SALES)
    store.ensure_table(definition)
    store.bulk_insert("sales", definition.column_names, SALES)


def test_operations_before_initialize_are_rejected():
    store = RelationalStore()
    assert store.ready is False
    with pytest.raises(StoreNotReadyError):
        store.query("SELECT 1")
    with pytest.raises(StoreNotReadyError):
        store.ensure_table(build_table_definition("t", [{"a": 1}]))


def test_initialize_failure_leaves_store_not_ready():
    store = RelationalStore("not a url")
    with pytest.raises(StoreInitError):
        store.initialize()
    assert store.ready is False


def test_ensure_table_is_idempotent(store):
    definition = build_table_definition("sales", SALES)
    store.ensure_table(definition)
    store.ensure_table(definition)
    assert store.table_exists("sales")
    assert not store.table_exists("other")


def test_bulk_insert_and_query_rows(store):
    _load_sales(store)
    rows = store.query('SELECT "region", "amount" FROM "sales" ORDER BY "amount"')
    assert rows == [
        {"region": "west", "amount": 10},
        {"region": "east", "amount": 25},
    ]


def test_query_aggregate_alias(store):
    _load_sales(store)
    assert store.query("SELECT SUM(amount) AS total FROM sales;") == [{"total": 35}]


def test_query_empty_result(store):
    _load_sales(store)
    assert store.query("SELECT * FROM sales WHERE region = 'north'") == []


def test_query_text_is_not_parsed_for_bind_params(store):
    _load_sales(store)
    rows = store.query("SELECT 'a :b' AS label, region FROM sales LIMIT 1")
    assert rows == [{"label": "a :b", "region": "west"}]


def test_query_errors_raise_query_error(store):
    with pytest.raises(QueryError, match="no such table: missing_table"):
        store.query("SELECT * FROM missing_table")


def test_bulk_insert_failure_rolls_back_whole_batch(store):
    definition = build_table_definition("t", [{"a": 1}])
    store.ensure_table(definition)
    rows = [{"a": 1}, {"a": 2}, {"a": {"not": "a scalar"}}]
    with pytest.raises(IngestError):
        store.bulk_insert("t", definition.column_names, rows)
    assert store.query('SELECT COUNT(*) AS n FROM "t"') == [{"n": 0}]


def test_bulk_insert_row_missing_column_fails(store):
    definition = build_table_definition("t", [{"a": 1, "b": 2}])
    store.ensure_table(definition)
    with pytest.raises(IngestError, match="'b'"):
        store.bulk_insert("t", definition.column_names, [{"a": 1, "b": 2}, {"a": 3}])
    assert store.query('SELECT COUNT(*) AS n FROM "t"') == [{"n": 0}]


def test_bulk_insert_empty_is_noop(store):
    assert store.bulk_insert("anything", ["a"], []) == 0


def test_drop_table(store):
    _load_sales(store)
    store.drop_table("sales")
    assert not store.table_exists("sales")


def test_query_multiple_statements_raise_query_error(store):
    with pytest.raises(QueryError):
        store.query("SELECT 1; SELECT 2;")


def test_query_blob_values_become_hex_literals(store):
    assert store.query("SELECT X'FF00' AS b, 1 AS n") == [{"b": "X'FF00'", "n": 1}]


def test_ensure_table_reserved_name_raises_ingest_error(store):
    definition = build_table_definition("sqlite_export", SALES)
    with pytest.raises(IngestError, match="reserved"):
        store.ensure_table(definition)
    assert store.ready


def test_load_table_creates_and_inserts(store):
    definition = build_table_definition("sales", SALES)
    assert store.load_table(definition, SALES) == 2
    assert store.query("SELECT COUNT(*) AS n FROM sales") == [{"n": 2}]


def test_load_table_failure_creates_nothing(store):
    rows = [{"x": 1, "y": 2}, {"x": 3}]
    with pytest.raises(IngestError):
        store.load_table(build_table_definition("t", rows), rows)
    assert not store.table_exists("t")


def test_failed_replace_keeps_previous_table_and_rows(store):
    _load_sales(store)
    rows = [{"x": 1, "y": 2}, {"x": 3}]

    with pytest.raises(IngestError):
        store.load_table(build_table_definition("sales", rows), rows, replace=True)

    columns = [r["name"] for r in store.query("PRAGMA table_info(sales)")]
    assert columns == ["region", "amount"]
    assert store.query("SELECT COUNT(*) AS n FROM sales") == [{"n": 2}]


def test_replace_recreates_table(store):
    _load_sales(store)
    rows = [{"x": 1}]
    store.load_table(build_table_definition("sales", rows), rows, replace=True)
    assert store.query("SELECT * FROM sales") == [{"x": 1}]
