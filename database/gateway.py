# -*- coding: utf-8 -*-
"""
================================================================================
Data Access Gateway
================================================================================
Purpose:
----------------
`DataGateway` owns the single psycopg2 connection used for the lifetime of an
interactive session. Every other module talks to PostgreSQL through it.

All statements are executed with psycopg2 parameter binding (`%s`
placeholders plus a params tuple); no caller ever formats user input into
SQL text.

Result rows are returned as lists of strings (or None for SQL NULL), in
column order, so callers parse exactly the values they need.

Transactions:
- Outside of `transaction()`, each statement is committed as soon as it runs.
- Inside `with gateway.transaction():`, statements are committed together on
  exit, or rolled back together if anything raises.
----------------
"""

import logging
from contextlib import contextmanager

import psycopg2
import psycopg2.errors

from common.errors import DataAccessError

logger = logging.getLogger(__name__)


def _as_text(value):
    return None if value is None else str(value)


class DataGateway:
    """Thin wrapper around one psycopg2 connection."""

    def __init__(self, connection):
        self._connection = connection
        self._in_transaction = False

    # =====================================================================================
    # --- Statement Execution ---
    # =====================================================================================

    def _rollback(self):
        # A dropped connection cannot be rolled back; the original error is what matters.
        if self._connection.closed:
            return
        try:
            self._connection.rollback()
        except psycopg2.Error as e:
            logger.warning("Rollback failed: %s", e)

    def _execute(self, sql, params, handle_cursor):
        try:
            with self._connection.cursor() as cur:
                cur.execute(sql, params)
                result = handle_cursor(cur)
            if not self._in_transaction:
                self._connection.commit()
            return result
        except psycopg2.Error as e:
            logger.error("Statement failed: %s | params=%r | reason: %s", sql.strip(), params, e)
            if not self._in_transaction:
                self._rollback()
            raise DataAccessError(f"Database error: {str(e).strip()}") from e

    def execute_update(self, sql, params=()):
        """
        Executes an INSERT, UPDATE, DELETE or DDL statement.

        Returns:
            int: The number of affected rows.
        """
        return self._execute(sql, params, lambda cur: cur.rowcount)

    def execute_query_and_return_result(self, query, params=()):
        """
        Executes a SELECT and returns its rows.

        Returns:
            list[list[str]]: One list of column values per row, rendered as text.
        """
        return self._execute(
            query, params,
            lambda cur: [[_as_text(value) for value in row] for row in cur.fetchall()]
        )

    def execute_query_and_print_result(self, query, params=()):
        """
        Executes a SELECT and prints the rows to stdout, tab separated, with
        a header line of column names before the first row.

        Returns:
            int: The number of rows printed.
        """
        def print_rows(cur):
            rows = cur.fetchall()
            if rows:
                print("\t".join(column[0] for column in cur.description))
            for row in rows:
                print("\t".join(str(value) for value in row))
            return len(rows)

        return self._execute(query, params, print_rows)

    def execute_query(self, query, params=()):
        """Executes a SELECT and returns only the number of rows it produced."""
        return self._execute(query, params, lambda cur: len(cur.fetchall()))

    def fetch_one(self, query, params=()):
        """Returns the first row of a SELECT, or None when it produced no rows."""
        rows = self.execute_query_and_return_result(query, params)
        return rows[0] if rows else None

    def get_curr_seq_val(self, sequence):
        """
        Returns the current value of a sequence in this session, or -1 if
        `nextval` has not been called for it yet in this session.
        """
        try:
            row = self.fetch_one("SELECT currval(%s);", (sequence,))
        except DataAccessError as e:
            if isinstance(e.__cause__, psycopg2.errors.ObjectNotInPrerequisiteState):
                return -1
            raise
        return int(row[0]) if row else -1

    def get_next_seq_val(self, sequence):
        """Advances a sequence and returns the new value."""
        row = self.fetch_one("SELECT nextval(%s);", (sequence,))
        return int(row[0])

    # =====================================================================================
    # --- Transactions and Cleanup ---
    # =====================================================================================

    @contextmanager
    def transaction(self):
        """Groups several statements into a single commit."""
        if self._in_transaction:
            yield self
            return
        self._in_transaction = True
        try:
            yield self
            self._connection.commit()
        except psycopg2.Error as e:
            logger.error("Commit failed: %s", e)
            self._rollback()
            raise DataAccessError(f"Database error: {str(e).strip()}") from e
        except Exception:
            self._rollback()
            raise
        finally:
            self._in_transaction = False

    def cleanup(self):
        """Closes the physical connection if it is open."""
        if self._connection is None:
            return
        try:
            self._connection.close()
        except psycopg2.Error as e:
            logger.warning("Error while closing the connection: %s", e)
        finally:
            self._connection = None
