"""Tests for table-name derivation and first-row schema inference."""
import pytest

from csvchat.domain.models import ColumnType
from csvchat.ingest.schema import (
    build_table_definition,
    derive_table_name,
    infer_column_type,
)


class TestDeriveTableName:
    def test_spaces_and_extension(self):
        assert derive_table_name("My File.csv") == "my_file"

    def test_idempotent(self):
        once = derive_table_name("Q3 Sales-Report (final).csv")
        assert once == "q3_sales_report__final_"
        assert derive_table_name(once) == once

    def test_only_last_extension_removed(self):
        assert derive_table_name("sales.2024.csv") == "sales_2024"

    def test_no_extension(self):
        assert derive_table_name("Orders") == "orders"


class TestInferColumnType:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (3, ColumnType.INTEGER),
            (3.0, ColumnType.INTEGER),
            (-7, ColumnType.INTEGER),
            (3.5, ColumnType.REAL),
            ("abc", ColumnType.TEXT),
            ("3", ColumnType.TEXT),
            (None, ColumnType.TEXT),
            (True, ColumnType.TEXT),
            (False, ColumnType.TEXT),
        ],
    )
    def test_first_row_value(self, value, expected):
        assert infer_column_type(value) is expected


class TestBuildTableDefinition:
    def test_sales_statement(self):
        d = build_table_definition("sales", [{"region": "west", "amount": 10}])
        assert d.create_statement == (
            'CREATE TABLE IF NOT EXISTS "sales" ("region" TEXT, "amount" INTEGER);'
        )
        assert d.column_names == ["region", "amount"]

    def test_deterministic(self):
        rows = [{"b": 1.5, "a": "x", "c": None}]
        first = build_table_definition("t", rows)
        second = build_table_definition("t", rows)
        assert first == second
        assert first.column_names == ["b", "a", "c"]

    def test_only_first_row_inspected(self):
        rows = [{"v": 1}, {"v": "text later"}, {"v": 2.5}]
        d = build_table_definition("t", rows)
        assert [c.type for c in d.columns] == [ColumnType.INTEGER]

    def test_identifiers_quoted(self):
        d = build_table_definition("order", [{"unit price": 2.5, 'say "hi"': "x"}])
        assert '"order"' in d.create_statement
        assert '"unit price" REAL' in d.create_statement
        assert '"say ""hi""" TEXT' in d.create_statement

    def test_empty_sample_raises(self):
        with pytest.raises(ValueError):
            build_table_definition("t", [])
