"""Tests for the isolated query executor."""
from csvchat.infra.db.store import RelationalStore
from csvchat.ingest.schema import build_table_definition
from csvchat.orchestration.executor import EMPTY_STATEMENT_MESSAGE, execute_query


def _seed(store):
    rows = [{"region": "west", "amount": 10}]
    definition = build_table_definition("sales", rows)
    store.ensure_table(definition)
    store.bulk_insert("sales", definition.column_names, rows)


def test_success_returns_rows_and_no_error(store):
    _seed(store)
    outcome = execute_query(store, "SELECT SUM(amount) AS total FROM sales;")
    assert outcome.ok
    assert outcome.error is None
    assert outcome.rows == [{"total": 10}]


def test_success_with_no_rows(store):
    _seed(store)
    outcome = execute_query(store, "SELECT * FROM sales WHERE amount > 100")
    assert outcome.rows == []
    assert outcome.error is None


def test_unknown_table_becomes_error_string(store):
    outcome = execute_query(store, "SELECT * FROM nowhere")
    assert outcome.rows == []
    assert outcome.error is not None
    assert "no such table: nowhere" in outcome.error


def test_syntax_error_becomes_error_string(store):
    _seed(store)
    outcome = execute_query(store, "SELEC amount FROM sales")
    assert outcome.rows == []
    assert "syntax error" in outcome.error


def test_multiple_statements_rejected(store):
    _seed(store)
    outcome = execute_query(store, "SELECT 1; SELECT 2;")
    assert outcome.rows == []
    assert outcome.error


def test_store_not_ready_becomes_error_string():
    outcome = execute_query(RelationalStore(), "SELECT 1")
    assert outcome.rows == []
    assert "not initialized" in outcome.error


def test_store_usable_after_failure(store):
    _seed(store)
    assert execute_query(store, "SELECT * FROM nowhere").error
    assert execute_query(store, "SELECT COUNT(*) AS n FROM sales").rows == [{"n": 1}]


def test_empty_statement_is_an_error_not_a_success(store):
    for sql in ("", "   ", None):
        outcome = execute_query(store, sql)
        assert outcome.rows == []
        assert outcome.error == EMPTY_STATEMENT_MESSAGE
