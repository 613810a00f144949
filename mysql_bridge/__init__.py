from importlib.metadata import version

__version__ = version("mysql-bridge")   # reads pyproject.toml metadata

from .config import load_config
from .exceptions import MySQLBridgeError, DatabaseConnectionError, DatabaseQueryError
from .bind_utils import BoundParam
from .base_utils import BaseDatabase, QueryLog, QueryResult, QueryStatus
from .mysql_utils import MySQLDatabase
from .db_utils import (
    connect,
    run_sql,
    get_total_query_count,
    get_all_queries,
)

__all__ = [
    "__version__",
    "load_config",
    "MySQLBridgeError",
    "DatabaseConnectionError",
    "DatabaseQueryError",
    "BoundParam",
    "BaseDatabase",
    "QueryLog",
    "QueryResult",
    "QueryStatus",
    "MySQLDatabase",
    "connect",
    "run_sql",
    "get_total_query_count",
    "get_all_queries",
]
