"""
Unit Tests for QueryExecutor
============================
"""

import json
from datetime import date, datetime
from decimal import Decimal

import pytest

from data_agent.executor import (
    MAX_SAFE_INTEGER,
    ExecutionError,
    QueryExecutor,
    serialize_rows,
    to_json_safe,
)


class TestQueryExecutor:
    """Tests against a real SQLite store."""

    def test_rows_are_dicts(self, query_executor: QueryExecutor) -> None:
        rows = query_executor.execute('SELECT "id", "subject" FROM "ER" ORDER BY "id"')

        assert rows[0] == {"id": "er1", "subject": "SSO support"}
        assert len(rows) == 4

    def test_columns_follow_the_statement(self, query_executor: QueryExecutor) -> None:
        """Test that aliases and aggregates define the row keys."""
        rows = query_executor.execute(
            'SELECT c."name" AS company, COUNT(*) AS "count" '
            'FROM "ER" e JOIN "Company" c ON e."companyId" = c."id" '
            'GROUP BY c."name" ORDER BY c."name"'
        )

        assert rows == [{"company": "Acme", "count": 2}, {"company": "Globex", "count": 2}]

    def test_empty_result(self, query_executor: QueryExecutor) -> None:
        rows = query_executor.execute("SELECT \"id\" FROM \"ER\" WHERE \"status\" = 'REJECTED'")
        assert rows == []

    def test_big_integer_survives(self, query_executor: QueryExecutor) -> None:
        """Test that integers beyond the safe range come back as exact strings."""
        rows = query_executor.execute('SELECT 9223372036854775807 AS "big", 42 AS "small"')

        assert rows == [{"big": "9223372036854775807", "small": 42}]

    def test_overflowing_real_is_json_safe(self, query_executor: QueryExecutor) -> None:
        rows = query_executor.execute('SELECT 1e999 AS "huge"')

        assert rows == [{"huge": "inf"}]
        json.dumps(rows, allow_nan=False)

    def test_null_values(self, query_executor: QueryExecutor) -> None:
        rows = query_executor.execute("SELECT \"impact\" FROM \"ER\" WHERE \"id\" = 'er2'")
        assert rows == [{"impact": None}]

    def test_unknown_table(self, query_executor: QueryExecutor) -> None:
        with pytest.raises(ExecutionError) as exc_info:
            query_executor.execute("SELECT * FROM Requests")

        assert "no such table: Requests" in exc_info.value.message

    def test_unknown_column(self, query_executor: QueryExecutor) -> None:
        with pytest.raises(ExecutionError) as exc_info:
            query_executor.execute("SELECT title FROM ER")

        assert exc_info.value.message == "no such column: title"

    def test_read_only_connection(self, query_executor: QueryExecutor) -> None:
        """Test that the store refuses writes even if the policy were bypassed."""
        with pytest.raises(ExecutionError) as exc_info:
            query_executor.execute("INSERT INTO \"Tag\" (\"id\", \"name\") VALUES ('t1', 'x')")

        assert "readonly" in exc_info.value.message

        rows = query_executor.execute('SELECT COUNT(*) AS "n" FROM "Tag"')
        assert rows == [{"n": 0}]

    def test_requires_url_or_engine(self) -> None:
        with pytest.raises(ValueError):
            QueryExecutor()


class TestJsonSafe:
    """Tests for value coercion."""

    def test_safe_integers_unchanged(self) -> None:
        assert to_json_safe(MAX_SAFE_INTEGER) == MAX_SAFE_INTEGER
        assert to_json_safe(-MAX_SAFE_INTEGER) == -MAX_SAFE_INTEGER

    def test_unsafe_integers_become_strings(self) -> None:
        assert to_json_safe(MAX_SAFE_INTEGER + 1) == "9007199254740992"
        assert to_json_safe(-(2**63)) == "-9223372036854775808"

    def test_booleans_unchanged(self) -> None:
        assert to_json_safe(True) is True

    def test_decimal(self) -> None:
        assert to_json_safe(Decimal("12.50")) == "12.50"

    def test_dates(self) -> None:
        assert to_json_safe(datetime(2024, 5, 1, 9, 30)) == "2024-05-01T09:30:00"
        assert to_json_safe(date(2024, 5, 1)) == "2024-05-01"

    def test_bytes(self) -> None:
        assert to_json_safe(b"\x01\xff") == "01ff"

    def test_nested(self) -> None:
        value = {"rows": [(1, 2**60)]}
        assert to_json_safe(value) == {"rows": [[1, str(2**60)]]}

    def test_non_finite_floats(self) -> None:
        assert to_json_safe(float("inf")) == "inf"
        assert to_json_safe(float("-inf")) == "-inf"
        assert to_json_safe(float("nan")) == "nan"
        assert to_json_safe(1.5) == 1.5

    def test_serialize_rows(self) -> None:
        text = serialize_rows([{"status": "OPEN", "total": 2**62}])

        assert json.loads(text) == [{"status": "OPEN", "total": str(2**62)}]
        assert text.startswith("[\n  {")


class TestDriverCalls:
    """Tests for how statements are handed to the DBAPI driver."""

    def test_statement_sent_without_parameters(
        self, query_executor: QueryExecutor, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that % in generated SQL never meets pyformat interpolation."""
        dialect = query_executor.engine.dialect
        calls: list[tuple] = []
        do_execute = dialect.do_execute
        do_execute_no_params = dialect.do_execute_no_params

        def record_execute(cursor, statement, parameters, context=None):
            calls.append(("do_execute", statement, parameters))
            return do_execute(cursor, statement, parameters, context)

        def record_no_params(cursor, statement, context=None):
            calls.append(("do_execute_no_params", statement))
            return do_execute_no_params(cursor, statement, context)

        monkeypatch.setattr(dialect, "do_execute", record_execute)
        monkeypatch.setattr(dialect, "do_execute_no_params", record_no_params)

        sql = "SELECT \"id\" FROM \"ER\" WHERE \"subject\" LIKE '%SSO%'"
        rows = query_executor.execute(sql)

        assert rows == [{"id": "er1"}]
        assert [call for call in calls if call[1] == sql] == [("do_execute_no_params", sql)]
