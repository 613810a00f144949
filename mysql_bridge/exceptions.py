# mysql_bridge/exceptions.py

from typing import Optional


class MySQLBridgeError(Exception):
    """Base exception for mysql-bridge errors. Carries the driver errno/text when known."""

    def __init__(self, message: str, *, errno: Optional[int] = None, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.errno = errno
        self.error = error


class DatabaseConnectionError(MySQLBridgeError):
    """Raised when a connection to the server cannot be established."""


class DatabaseQueryError(MySQLBridgeError):
    """Raised when a statement fails to prepare, bind or execute."""

    def __init__(self, message: str, *, errno: Optional[int] = None, error: Optional[str] = None,
                 sql: Optional[str] = None) -> None:
        super().__init__(message, errno=errno, error=error)
        self.sql = sql
