# mysql_bridge/mysql_utils.py

import logging
from typing import Any, List, Optional, Sequence, Tuple

import pymysql
import pymysql.connections
import pymysql.err

from .base_utils import BaseDatabase, QueryLog, QueryResult, QueryStatus
from .bind_utils import BoundStatement, bind_params, translate_placeholders
from .exceptions import DatabaseConnectionError, DatabaseQueryError

logger = logging.getLogger(__name__)


def _error_details(exc: Exception) -> Tuple[Optional[int], str]:
    """Pull (errno, message) out of a PyMySQL exception."""
    if len(exc.args) >= 2 and isinstance(exc.args[0], int):
        return exc.args[0], str(exc.args[1])
    return None, str(exc)


class MySQLDatabase(BaseDatabase):
    """
    MySQL wrapper for mysql-bridge, using PyMySQL under the hood.

    Each instance holds onto a single connection. Statements run with
    autocommit on; `?` is the placeholder for prepared queries.
    """

    def __init__(
            self,
            username: str,
            password: str,
            dbname: str,
            host: str = "localhost",
            *,
            port: int = 3306,
            query_log: Optional[QueryLog] = None,
            **connect_kwargs: Any
    ) -> None:
        """
        Open a connection with the given details.

        Args:
            username:       Username for the database.
            password:       Password for the database.
            dbname:         Database name.
            host:           Host of the database.
            port:           Server port.
            query_log:      Log to record statements in; the process-wide log if omitted.
            connect_kwargs: Passed through to pymysql.connect.

        Raises:
            DatabaseConnectionError: If the driver cannot connect.
        """
        super().__init__(query_log)
        self._affected_rows = -1
        self._insert_id = 0
        try:
            self.conn = pymysql.connect(
                host=host,
                port=port,
                user=username,
                password=password,
                database=dbname,
                autocommit=True,
                **connect_kwargs
            )
        except pymysql.err.MySQLError as e:
            errno, error = _error_details(e)
            logger.error("DB connection to %s@%s failed", username, host, exc_info=e)
            raise DatabaseConnectionError(
                f"Could not connect to database: {error}", errno=errno, error=error
            ) from e

    @classmethod
    def from_creds(cls, creds: dict, **kwargs: Any) -> "MySQLDatabase":
        """
        Build a connection from a creds dict (host, port, user, password, database).
        The 'driver' key, if present, is ignored.
        """
        return cls(
            creds["user"],
            creds["password"],
            creds.get("database"),
            creds.get("host", "localhost"),
            port=creds.get("port", 3306),
            **kwargs
        )

    def _prepare_sql(self, sql: str, params: Sequence[Any]) -> BoundStatement:
        """
        Translate `?` placeholders into PyMySQL's %s and bind the parameters.
        """
        driver_sql, placeholders = translate_placeholders(sql)
        return bind_params(driver_sql, params, placeholder_count=placeholders)

    def _failed(self, sql: str, errno: Optional[int], error: str, exc: Exception) -> QueryResult:
        logger.error("SQL execution failed for: %s", sql, exc_info=exc)
        self._affected_rows = -1
        self._insert_id = 0
        return QueryResult(QueryStatus.FAILED, sql, errno=errno, error=error)

    def execute(
            self,
            sql: str,
            params: Optional[Sequence[Any]] = None,
            *,
            as_dict: bool = True
    ) -> QueryResult:
        """
        Execute one statement and describe the outcome.

        With `params` left as None the SQL is sent as-is. Any sequence (even an
        empty one) sends it as a prepared statement with `?` placeholders.
        Driver, binding and closed-connection failures come back as a FAILED
        result rather than an exception.

        Returns:
            QueryResult with rows (dicts if `as_dict`, otherwise lists) when
            the statement produced a result set.
        """
        if not self.conn.open:
            return QueryResult(QueryStatus.FAILED, sql, error="Connection is closed")

        self.query_log.record(sql)
        logger.debug("Executing SQL: %s", sql)

        # 1) Bind
        args = None
        exec_sql = sql
        if params is not None:
            try:
                statement = self._prepare_sql(sql, params)
            except DatabaseQueryError as e:
                return self._failed(sql, e.errno, str(e), e)
            exec_sql, args = statement.sql, statement.values

        # 2) Execute and fetch
        try:
            with self.conn.cursor() as cursor:
                cursor.execute(exec_sql, args)
                rows = None
                if cursor.description is not None:
                    rows = self._fetch_rows(cursor, as_dict)
                affected = cursor.rowcount
                insert_id = cursor.lastrowid or 0
        except pymysql.err.MySQLError as e:
            errno, error = _error_details(e)
            return self._failed(sql, errno, error, e)

        self._affected_rows = affected
        self._insert_id = insert_id
        status = QueryStatus.AFFECTED if (rows is not None or affected > 0) else QueryStatus.NO_EFFECT
        return QueryResult(status, sql, rows=rows, affected_rows=affected, insert_id=insert_id)

    @staticmethod
    def _fetch_rows(cursor, as_dict: bool) -> List[Any]:
        if as_dict:
            cols = [col[0] for col in cursor.description]
            return [dict(zip(cols, row)) for row in cursor.fetchall()]
        return [list(row) for row in cursor.fetchall()]

    def get_affected_rows(self) -> int:
        """Affected rows of the last statement; 0 if none has run or it failed."""
        if self._affected_rows == -1:
            return 0
        return self._affected_rows

    def get_insert_id(self) -> Optional[int]:
        """Last auto-generated id, or None if the last statement generated none."""
        if self._insert_id == 0:
            return None
        return self._insert_id

    def get_native_connection(self) -> pymysql.connections.Connection:
        return self.conn

    def clean(self, value: Any) -> str:
        """
        Escape the string form of `value` for interpolation into SQL text.
        Prefer the prepared query methods.
        """
        if not self.conn.open:
            raise DatabaseQueryError("Connection is closed")
        return self.conn.escape_string(str(value))

    def close_connection(self) -> None:
        if not self.conn.open:
            logger.debug("Connection already closed")
            return
        self.conn.close()
