# mysql_bridge/db_utils.py

import logging
import re
import sys
from typing import Optional, Any, List, Union, Sequence, Tuple

from . import config
from .base_utils import QueryLog, default_query_log
from .mysql_utils import MySQLDatabase

logging.basicConfig(stream=sys.stdout, level=logging.INFO)
logger = logging.getLogger(__name__)


def connect(
        *,
        profile: str = None,
        db_creds: Optional[dict] = None,
        query_log: Optional[QueryLog] = None
) -> MySQLDatabase:
    """
    Open a MySQLDatabase from direct credentials or a config profile.

    Args:
        profile:   INI section name to use (falls back to ENV, then [DEFAULT].active).
        db_creds:  Direct credentials dict; mutually exclusive with profile.
        query_log: Log for this connection; the process-wide log if omitted.

    Raises:
        ValueError: If both `profile` and `db_creds` are given.
        DatabaseConnectionError: If the server cannot be reached.
    """
    if db_creds and profile:
        raise ValueError("Specify only one of db_creds or profile, not both.")
    creds = db_creds if db_creds else config.load_config(profile)
    return MySQLDatabase.from_creds(creds, query_log=query_log)


def run_sql(
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        as_dict: bool = True,
        quiet: Optional[bool] = None,
        profile: str = None,
        db_creds: Optional[dict] = None
) -> Union[List[dict], List[list], int, None]:
    """
    Open a connection, execute one statement and close it again.

    Args:
        sql:      SQL query string (use ? placeholders when passing params).
        params:   Parameters for a prepared query; None sends the SQL as-is.
        as_dict:  Return rows as dicts (True) or lists (False).
        quiet:    Suppress SQL and row-count output if True. Defaults to False
                  for INSERT/UPDATE/DELETE and True otherwise.
        profile:  INI section name to use.
        db_creds: Direct credentials dict; mutually exclusive with profile.

    Returns:
        Rows for statements with a result set; the insert id for INSERT
        (None if none was generated); the affected row count for
        UPDATE/DELETE; [] for anything else.

    Raises:
        DatabaseQueryError: If the statement fails.
    """
    raw_sql = sql.strip()
    match = re.search(r'^\s*(?:--.*\n\s*)*([A-Za-z]+)', raw_sql)
    cmd = match.group(1).upper() if match else ''

    if quiet is None:
        quiet = cmd not in ("INSERT", "UPDATE", "DELETE")

    db = connect(profile=profile, db_creds=db_creds)
    try:
        if not quiet:
            logger.info("Running query: %s  -- params: %r", raw_sql, params)

        result = db.execute(raw_sql, params, as_dict=as_dict).raise_for_status()

        if result.rows is not None:
            return result.rows

        if cmd in ("INSERT", "UPDATE", "DELETE") and not quiet:
            logger.info("%d rows affected.", db.get_affected_rows())
        if cmd == "INSERT":
            return db.get_insert_id()
        if cmd in ("UPDATE", "DELETE"):
            return db.get_affected_rows()

        # DDL or other statements → no result set; return empty list for consistency.
        return []
    finally:
        db.close_connection()


def get_total_query_count() -> int:
    """Number of statements submitted on every connection using the process-wide log."""
    return default_query_log.count


def get_all_queries() -> Tuple[str, ...]:
    """Statements submitted on every connection using the process-wide log, in order."""
    return default_query_log.queries
