"""
Tests for invoice data access.

The connection is a MagicMock, so these tests check the SQL text, the
positional parameters and the row shaping, not a live database.
"""

from contextlib import contextmanager
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from dashboard.services.invoice_service import (
    DELETE_INVOICE_SQL,
    FILTERED_INVOICES_SQL,
    INSERT_INVOICE_SQL,
    INVOICE_BY_ID_SQL,
    INVOICES_COUNT_SQL,
    UPDATE_INVOICE_SQL,
    delete_invoice,
    fetch_edit_invoice_page,
    fetch_filtered_invoices,
    fetch_invoice_by_id,
    fetch_invoices_pages,
    insert_invoice,
    update_invoice,
)


class TestWrites:
    """Tests for the three write statements."""

    def test_insert_binds_values_positionally(self, db_conn, db_cursor):
        insert_invoice(db_conn, "c1", 5000, "pending", "2026-10-19")

        db_cursor.execute.assert_called_once_with(
            INSERT_INVOICE_SQL, ["c1", 5000, "pending", "2026-10-19"]
        )
        assert INSERT_INVOICE_SQL.count("%s") == 4
        db_conn.commit.assert_not_called()

    def test_update_never_touches_date(self, db_conn, db_cursor):
        rowcount = update_invoice(db_conn, "inv-1", "c2", 1999, "paid")

        assert rowcount == 1
        db_cursor.execute.assert_called_once_with(
            UPDATE_INVOICE_SQL, ["c2", 1999, "paid", "inv-1"]
        )
        assert "date" not in UPDATE_INVOICE_SQL

    def test_update_reports_zero_rows(self, db_conn, db_cursor):
        db_cursor.rowcount = 0

        assert update_invoice(db_conn, "missing", "c2", 100, "paid") == 0

    def test_delete_by_id(self, db_conn, db_cursor):
        assert delete_invoice(db_conn, "inv-1") == 1
        db_cursor.execute.assert_called_once_with(DELETE_INVOICE_SQL, ["inv-1"])

    def test_hostile_values_stay_out_of_sql_text(self, db_conn, db_cursor):
        hostile = "x'; DROP TABLE invoices; --"

        insert_invoice(db_conn, hostile, 100, "paid", "2026-10-19")

        sql, params = db_cursor.execute.call_args.args
        assert hostile not in sql
        assert params[0] == hostile


class TestFetchInvoiceById:
    """Tests for the edit-form lookup."""

    def test_converts_amount_to_major_units(self, db_conn, db_cursor):
        db_cursor.fetchone.return_value = {
            "id": "inv-1",
            "customer_id": "c1",
            "amount": 1234,
            "status": "pending",
        }

        invoice = fetch_invoice_by_id(db_conn, "inv-1")

        assert invoice == {"id": "inv-1", "customer_id": "c1", "amount": 12.34, "status": "pending"}
        db_cursor.execute.assert_called_once_with(INVOICE_BY_ID_SQL, ["inv-1"])

    def test_missing_invoice_returns_none(self, db_conn, db_cursor):
        db_cursor.fetchone.return_value = None

        assert fetch_invoice_by_id(db_conn, "missing") is None


class TestListing:
    """Tests for the filtered, paginated listing."""

    def test_search_term_is_bound_to_every_column(self, db_conn, db_cursor):
        db_cursor.fetchall.return_value = []

        fetch_filtered_invoices(db_conn, "acme", 1)

        sql, params = db_cursor.execute.call_args.args
        assert sql == FILTERED_INVOICES_SQL
        assert params == ["%acme%"] * 5 + [6, 0]

    def test_page_sets_offset(self, db_conn, db_cursor):
        db_cursor.fetchall.return_value = []

        fetch_filtered_invoices(db_conn, "", 3)

        assert db_cursor.execute.call_args.args[1][-2:] == [6, 12]

    def test_rows_are_stringified(self, db_conn, db_cursor):
        db_cursor.fetchall.return_value = [{
            "id": 7,
            "customer_id": 3,
            "amount": 5000,
            "date": date(2026, 10, 19),
            "status": "paid",
            "name": "Acme",
            "email": "billing@acme.test",
            "image_url": None,
        }]

        invoices = fetch_filtered_invoices(db_conn, "", 1)

        assert invoices[0]["id"] == "7"
        assert invoices[0]["customer_id"] == "3"
        assert invoices[0]["date"] == "2026-10-19"
        assert invoices[0]["amount"] == 5000

    @pytest.mark.parametrize("count,pages", [(0, 0), (1, 1), (6, 1), (7, 2), (13, 3)])
    def test_pages_round_up(self, db_conn, db_cursor, count, pages):
        db_cursor.fetchone.return_value = {"count": count}

        assert fetch_invoices_pages(db_conn, "acme") == pages
        db_cursor.execute.assert_called_once_with(INVOICES_COUNT_SQL, ["%acme%"] * 5)


class TestFetchEditInvoicePage:
    """Tests for the parallel edit-page load."""

    @pytest.fixture
    def pooled_connections(self):
        """Replace get_conn with a factory that records each borrowed connection."""
        borrowed = []

        @contextmanager
        def fake_get_conn():
            conn = MagicMock()
            borrowed.append(conn)
            yield conn

        with patch("dashboard.services.invoice_service.get_conn", fake_get_conn):
            yield borrowed

    @pytest.mark.asyncio
    async def test_returns_invoice_and_customers(self, pooled_connections):
        invoice = {"id": "inv-1", "customer_id": "c1", "amount": 12.34, "status": "paid"}
        customers = [{"id": "c1", "name": "Acme"}]

        with patch(
            "dashboard.services.invoice_service.fetch_invoice_by_id", return_value=invoice
        ) as mock_invoice, patch(
            "dashboard.services.invoice_service.fetch_customers", return_value=customers
        ) as mock_customers:
            result = await fetch_edit_invoice_page("inv-1")

        assert result == (invoice, customers)
        assert mock_invoice.call_args.args[1] == "inv-1"
        mock_customers.assert_called_once()
        # each read runs on its own connection
        assert len(pooled_connections) == 2

    @pytest.mark.asyncio
    async def test_missing_invoice(self, pooled_connections):
        with patch(
            "dashboard.services.invoice_service.fetch_invoice_by_id", return_value=None
        ), patch(
            "dashboard.services.invoice_service.fetch_customers", return_value=[]
        ):
            invoice, customers = await fetch_edit_invoice_page("missing")

        assert invoice is None
        assert customers == []

    @pytest.mark.asyncio
    async def test_read_failure_propagates(self, pooled_connections):
        with patch(
            "dashboard.services.invoice_service.fetch_invoice_by_id",
            side_effect=RuntimeError("connection lost"),
        ), patch(
            "dashboard.services.invoice_service.fetch_customers", return_value=[]
        ):
            with pytest.raises(RuntimeError, match="connection lost"):
                await fetch_edit_invoice_page("inv-1")
