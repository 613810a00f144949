# mysql_bridge/bind_utils.py

from typing import Any, List, NamedTuple, Sequence, Tuple

from .exceptions import DatabaseQueryError

FLOAT = "d"
INTEGER = "i"
STRING = "s"

BIND_TYPES = (FLOAT, INTEGER, STRING)

_QUOTES = ("'", '"', "`")


class BoundParam(NamedTuple):
    """A bind value tagged with its type code: 'd' (float), 'i' (integer) or 's' (string)."""
    type_code: str
    value: Any


class BoundStatement(NamedTuple):
    sql: str
    types: str
    values: Tuple[Any, ...]


def infer_bind_type(value: Any, position: int) -> BoundParam:
    """
    Tag `value` with its bind type.

    Floats bind as 'd', ints (bool included) as 'i', everything else as 's'.
    None stays None so the driver sends NULL. Objects are bound through their
    own __str__; an object without one cannot be bound.

    Raises:
        DatabaseQueryError: If `value` has no string conversion, or is a
            BoundParam with an unknown type code.
    """
    if isinstance(value, BoundParam):
        if value.type_code not in BIND_TYPES:
            raise DatabaseQueryError(
                f"Parameter {position} has unknown bind type {value.type_code!r}"
            )
        return value
    if isinstance(value, float):
        return BoundParam(FLOAT, value)
    if isinstance(value, int):
        return BoundParam(INTEGER, value)
    if value is None or isinstance(value, (str, bytes, bytearray)):
        return BoundParam(STRING, value)
    if type(value).__str__ is object.__str__:
        raise DatabaseQueryError(
            f"Parameter {position} cannot be converted to a string, "
            f"it is of type: {type(value).__name__}"
        )
    return BoundParam(STRING, str(value))


def _comment_end(sql: str, i: int) -> int:
    """Index just past the comment starting at `i`, or -1 if none starts there."""
    if sql.startswith("/*", i):
        end = sql.find("*/", i + 2)
        return len(sql) if end == -1 else end + 2
    if sql[i] == "#" or (sql.startswith("--", i) and (i + 2 == len(sql) or sql[i + 2].isspace())):
        end = sql.find("\n", i)
        return len(sql) if end == -1 else end
    return -1


def translate_placeholders(sql: str, placeholder: str = "%s") -> Tuple[str, int]:
    """
    Replace `?` placeholders outside quoted literals and comments with
    `placeholder` and double every literal '%' so the driver's %-formatting
    leaves them alone.

    Returns:
        The translated SQL and the number of placeholders found.
    """
    out: List[str] = []
    count = 0
    quote = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if ch == "%":
            out.append("%%")
        elif quote:
            out.append(ch)
            if ch == "\\" and quote != "`" and i + 1 < len(sql):
                i += 1
                out.append("%%" if sql[i] == "%" else sql[i])
            elif ch == quote:
                quote = None
        elif _comment_end(sql, i) != -1:
            end = _comment_end(sql, i)
            out.append(sql[i:end].replace("%", "%%"))
            i = end
            continue
        elif ch in _QUOTES:
            quote = ch
            out.append(ch)
        elif ch == "?":
            out.append(placeholder)
            count += 1
        else:
            out.append(ch)
        i += 1
    return "".join(out), count


def bind_params(sql: str, params: Sequence[Any], *, placeholder_count: int = None) -> BoundStatement:
    """
    Infer a bind type for each parameter in order and build the statement.

    Args:
        sql:               Driver-ready SQL.
        params:            Ordered parameters (plain values or BoundParam).
        placeholder_count: Number of placeholders in `sql`; when given, a
                           mismatch with len(params) is a binding failure.
    """
    bound = [infer_bind_type(value, i) for i, value in enumerate(params)]
    if placeholder_count is not None and placeholder_count != len(bound):
        raise DatabaseQueryError(
            f"Number of bind parameters ({len(bound)}) does not match "
            f"number of placeholders ({placeholder_count})"
        )
    types = "".join(p.type_code for p in bound)
    return BoundStatement(sql, types, tuple(p.value for p in bound))
