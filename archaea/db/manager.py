#!/usr/bin/env python3
"""
Database manager for the archaea dashboard
Owns the PostgreSQL connection pool and runs parameterized queries
"""
import re
import time
import logging
from contextlib import contextmanager
from typing import Dict, Any, List, Tuple, Optional, Generator, Union

import psycopg2
import psycopg2.extras
import psycopg2.pool

from archaea.exceptions import (
    ConfigurationError, DatabaseError, QueryError, StoreUnavailableError
)

Params = Optional[Union[Tuple, List, Dict[str, Any]]]

IDENTIFIER_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def translate_db_error(error: psycopg2.Error, message: str,
                       details: Optional[Dict[str, Any]] = None) -> DatabaseError:
    """Map a psycopg2 error onto the dashboard's error taxonomy"""
    details = dict(details or {})
    if getattr(error, 'pgcode', None):
        details['code'] = error.pgcode
    if isinstance(error, (psycopg2.OperationalError, psycopg2.InterfaceError)):
        return StoreUnavailableError(f"{message}: {str(error).strip()}", details)
    return QueryError(f"{message}: {str(error).strip()}", details)


class DBManager:
    """Database manager for the archaea dashboard

    Constructed once per process and passed to the services that need it.
    The pool is opened eagerly so that bad credentials fail at startup.
    """

    REQUIRED_FIELDS = ['host', 'port', 'database', 'user', 'password']

    # Keys in the database config section that are not libpq parameters
    MANAGER_FIELDS = {'schema', 'reference_schema', 'min_connections', 'max_connections',
                      'slow_query_ms', 'pool_timeout_ms'}

    POOL_RETRY_SECONDS = 0.05

    def __init__(self, config: Dict[str, Any], connect: bool = True):
        """Initialize database manager

        Args:
            config: Database configuration dictionary
            connect: Open the connection pool immediately

        Raises:
            ConfigurationError: If required settings are missing
            StoreUnavailableError: If the pool cannot be opened
        """
        self.config = config
        self.logger = logging.getLogger("archaea.db")
        self._validate_config()

        self.schema = config.get('schema', 'archaea')
        self.min_connections = int(config.get('min_connections', 1))
        self.max_connections = int(config.get('max_connections', 20))
        self.slow_query_ms = float(config.get('slow_query_ms', 100))
        # How long a request waits for a free connection before giving up
        self.pool_timeout_ms = float(config.get('pool_timeout_ms', 0))
        self._pool: Optional[psycopg2.pool.ThreadedConnectionPool] = None

        if connect:
            self.open()

    def _validate_config(self) -> None:
        """Validate database configuration"""
        missing = [field for field in self.REQUIRED_FIELDS
                   if self.config.get(field) in (None, '')]
        if missing:
            err_msg = f"Missing required database configuration fields: {', '.join(missing)}"
            self.logger.error(err_msg)
            raise ConfigurationError(err_msg, {"missing": missing})

        for key, default in (('schema', 'archaea'), ('reference_schema', 'ecod_rep')):
            schema = self.config.get(key, default)
            if not IDENTIFIER_RE.match(str(schema)):
                raise ConfigurationError(f"Invalid database schema name: {schema!r}", {"key": key})

    @property
    def connection_params(self) -> Dict[str, Any]:
        """libpq connection keywords"""
        return {k: v for k, v in self.config.items() if k not in self.MANAGER_FIELDS}

    def table(self, name: str, schema: Optional[str] = None) -> str:
        """Schema-qualified table name; name must come from code, never from a caller

        Args:
            name: Table or view name
            schema: Schema other than the dashboard's own, e.g. the ECOD reference schema
        """
        schema = schema or self.schema
        for identifier in (schema, name):
            if not IDENTIFIER_RE.match(identifier):
                raise ValueError(f"Invalid table identifier: {identifier!r}")
        return f"{schema}.{name}"

    def open(self) -> None:
        """Open the connection pool"""
        if self._pool is not None:
            return
        params = self.connection_params
        try:
            self._pool = psycopg2.pool.ThreadedConnectionPool(
                self.min_connections, self.max_connections, **params
            )
        except psycopg2.Error as e:
            self.logger.error(f"Failed to open database pool: {str(e).strip()}")
            raise translate_db_error(e, "Failed to open database pool",
                                     {"host": params.get('host'), "database": params.get('database')}) from e
        self.logger.info(
            f"Database pool created: {params.get('user')}@{params.get('host')}:"
            f"{params.get('port')}/{params.get('database')}"
        )

    def close(self) -> None:
        """Close every pooled connection"""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            self.logger.info("Database pool closed")

    @contextmanager
    def get_connection(self) -> Generator[psycopg2.extensions.connection, None, None]:
        """Borrow a pooled connection; it is always returned to the pool

        Raises:
            StoreUnavailableError: If the pool is closed or exhausted
        """
        if self._pool is None:
            raise StoreUnavailableError("Database pool is not open")
        conn = self._checkout()
        try:
            yield conn
        finally:
            self._pool.putconn(conn, close=bool(conn.closed))

    def _checkout(self):
        """Take a connection, waiting up to pool_timeout_ms while the pool is exhausted"""
        deadline = time.monotonic() + self.pool_timeout_ms / 1000
        while True:
            try:
                return self._pool.getconn()
            except psycopg2.pool.PoolError as e:
                if self._pool is None or time.monotonic() >= deadline:
                    raise StoreUnavailableError(f"No database connection available: {e}",
                                                {"max_connections": self.max_connections}) from e
                time.sleep(self.POOL_RETRY_SECONDS)
            except psycopg2.Error as e:
                raise translate_db_error(e, "Database connection error") from e

    def _rollback(self, conn) -> None:
        """Best-effort rollback; a failure here must not mask the original error"""
        try:
            conn.rollback()
        except psycopg2.Error as e:
            self.logger.error(f"Rollback failed: {str(e).strip()}")

    def _run(self, cursor, query: str, params: Params) -> None:
        """Execute on a cursor, warning on slow statements"""
        start = time.monotonic()
        cursor.execute(query, params or ())
        duration_ms = (time.monotonic() - start) * 1000
        if duration_ms > self.slow_query_ms:
            self.logger.warning(
                f"Slow query ({duration_ms:.0f}ms, {cursor.rowcount} rows): {query.strip()[:100]}"
            )

    def _execute(self, query: str, params: Params, cursor_factory=None) -> List[Any]:
        with self.get_connection() as conn:
            try:
                with conn.cursor(cursor_factory=cursor_factory) as cursor:
                    self._run(cursor, query, params)
                    rows = cursor.fetchall() if cursor.description else []
                conn.commit()
                return rows
            except psycopg2.Error as e:
                self._rollback(conn)
                self.logger.error(f"Database query error: {str(e).strip()}\nQuery: {query.strip()[:200]}")
                raise translate_db_error(e, "Query execution error", {"query": query.strip()[:200]}) from e

    def execute_query(self, query: str, params: Params = None) -> List[Tuple]:
        """Execute a query and return results

        Args:
            query: SQL query with %s / %(name)s placeholders
            params: Bound parameters

        Returns:
            List of result tuples

        Raises:
            QueryError: If query execution fails
            StoreUnavailableError: If the database cannot be reached
        """
        return self._execute(query, params)

    def execute_dict_query(self, query: str, params: Params = None) -> List[Dict[str, Any]]:
        """Execute a query and return results as dictionaries"""
        return [dict(row) for row in
                self._execute(query, params, cursor_factory=psycopg2.extras.RealDictCursor)]

    @contextmanager
    def transaction(self, timeout_ms: Optional[int] = None) -> Generator[Any, None, None]:
        """Run a block inside one transaction and yield a dict cursor

        Commits when the block finishes; rolls back on any exception
        before re-raising it. psycopg2 errors are translated to
        StoreUnavailableError / QueryError, application errors pass through.

        Args:
            timeout_ms: statement_timeout applied for this transaction only
        """
        with self.get_connection() as conn:
            cursor = conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
            try:
                self.logger.debug("Starting database transaction")
                if timeout_ms:
                    cursor.execute("SET LOCAL statement_timeout = %s", (int(timeout_ms),))
                yield TransactionCursor(self, cursor)
                conn.commit()
                self.logger.debug("Transaction committed")
            except psycopg2.Error as e:
                self._rollback(conn)
                self.logger.error(f"Transaction failed: {str(e).strip()}")
                raise translate_db_error(e, "Transaction error") from e
            except BaseException:
                self._rollback(conn)
                self.logger.debug("Transaction rolled back")
                raise
            finally:
                cursor.close()

    def test_connection(self) -> bool:
        """Run a trivial query; returns False instead of raising"""
        try:
            rows = self.execute_dict_query("SELECT NOW() AS now, current_database() AS db")
            self.logger.info(f"Database connection test successful: {rows[0] if rows else None}")
            return bool(rows)
        except DatabaseError as e:
            self.logger.error(f"Database connection test failed: {e.message}")
            return False


class TransactionCursor:
    """Cursor wrapper handed out by DBManager.transaction"""

    def __init__(self, db: DBManager, cursor):
        self.db = db
        self.cursor = cursor

    def execute(self, query: str, params: Params = None) -> "TransactionCursor":
        self.db._run(self.cursor, query, params)
        return self

    def fetchone(self) -> Optional[Dict[str, Any]]:
        row = self.cursor.fetchone()
        return dict(row) if row is not None else None

    def fetchall(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.cursor.fetchall()]

    @property
    def rowcount(self) -> int:
        return self.cursor.rowcount
