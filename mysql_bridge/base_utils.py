# mysql_bridge/base_utils.py

import enum
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Any, Optional, Union, Sequence, Tuple

from .bind_utils import BoundStatement, bind_params
from .exceptions import DatabaseQueryError


class QueryLog:
    """
    Ordered record of every statement submitted through the connections that share it.

    The count only ever grows; records are never removed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queries: List[str] = []

    def record(self, sql: str) -> None:
        with self._lock:
            self._queries.append(sql)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._queries)

    @property
    def queries(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._queries)


# Shared by every connection that is not given its own log
default_query_log = QueryLog()


class QueryStatus(enum.Enum):
    AFFECTED = "affected"
    NO_EFFECT = "no_effect"
    FAILED = "failed"


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of a single statement.

    `rows` is None when the statement produced no result set.
    """
    status: QueryStatus
    sql: str
    rows: Optional[list] = None
    affected_rows: int = -1
    insert_id: int = 0
    errno: Optional[int] = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.status is QueryStatus.AFFECTED

    @property
    def failed(self) -> bool:
        return self.status is QueryStatus.FAILED

    def raise_for_status(self) -> "QueryResult":
        """Raise DatabaseQueryError if the statement failed, otherwise return self."""
        if self.failed:
            errno_text = f" Errorno: {self.errno}." if self.errno is not None else ""
            raise DatabaseQueryError(
                f"Invalid query.{errno_text} Error text: {self.error} for query: {self.sql}",
                errno=self.errno,
                error=self.error,
                sql=self.sql,
            )
        return self


class BaseDatabase(ABC):
    """
    Base class for database wrappers. Handles the query log and the
    send/get query family on top of a driver-specific `execute`.
    """

    def __init__(self, query_log: Optional[QueryLog] = None) -> None:
        self.query_log = query_log if query_log is not None else default_query_log

    def _prepare_sql(self, sql: str, params: Sequence[Any]) -> BoundStatement:
        """
        Driver-specific SQL preprocessing (e.g. placeholder translation).
        Override in subclasses if needed.
        """
        return bind_params(sql, params)

    @abstractmethod
    def execute(
            self,
            sql: str,
            params: Optional[Sequence[Any]] = None,
            *,
            as_dict: bool = True
    ) -> QueryResult:
        """Run one statement and report its outcome without raising on driver errors."""

    @abstractmethod
    def get_affected_rows(self) -> int:
        ...

    @abstractmethod
    def get_insert_id(self) -> Optional[int]:
        ...

    @abstractmethod
    def clean(self, value: Any) -> str:
        ...

    @abstractmethod
    def close_connection(self) -> None:
        ...

    def send_query(self, sql: str) -> bool:
        """
        Send a statement that is not expected to return rows.

        Returns:
            True if it produced a result set or affected at least one row,
            False if it affected none.

        Raises:
            DatabaseQueryError: If the driver reports an error.
        """
        return bool(self.execute(sql).raise_for_status())

    def get_query(self, sql: str) -> Union[List[dict], bool]:
        """Return every row as a dict, or True if the statement returns no result set."""
        return self._fetch(sql, None, as_dict=True)

    def get_query_numeric(self, sql: str) -> Union[List[list], bool]:
        """Return every row as a list of values, or True if the statement returns no result set."""
        return self._fetch(sql, None, as_dict=False)

    def send_prepared_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> bool:
        """
        Bind `params` to the `?` placeholders of `sql`, execute it once and
        report whether any row was affected.
        """
        result = self.execute(sql, _as_param_list(params)).raise_for_status()
        return result.affected_rows > 0

    def get_prepared_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[dict]:
        return self._fetch(sql, _as_param_list(params), as_dict=True, prepared=True)

    def get_prepared_query_numeric(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[list]:
        return self._fetch(sql, _as_param_list(params), as_dict=False, prepared=True)

    def get_total_query_count(self) -> int:
        return self.query_log.count

    def get_all_queries(self) -> Tuple[str, ...]:
        return self.query_log.queries

    def _fetch(self, sql, params, *, as_dict, prepared=False):
        result = self.execute(sql, params, as_dict=as_dict).raise_for_status()
        if result.rows is None:
            # Prepared statements always hand back a row list
            return [] if prepared else True
        return result.rows


def _as_param_list(params: Optional[Sequence[Any]]) -> List[Any]:
    if params is None:
        return []
    if isinstance(params, (str, bytes, bytearray)) or not isinstance(params, (list, tuple)):
        raise TypeError(
            f"Parameters must be given as a list or tuple, not {type(params).__name__}"
        )
    return list(params)
