"""
Parameterized SQL for the users table.

Every builder returns a ``(sql, params)`` pair with positional ``%s``
placeholders, ready for ``cursor.execute``.  Column names come from the
field descriptors, which only admit plain identifiers, so they can be
interpolated safely; values always travel as parameters.

Statements that change a row use ``RETURNING`` so that every operation
is a single round trip to the store.
"""

from typing import Any, List, Mapping, Sequence, Tuple

from ..schemas.fields import Fields

Query = Tuple[str, Tuple[Any, ...]]


def _select_column(name: str) -> str:
    # Unquoted identifiers are folded to lower case by PostgreSQL; alias
    # mixed-case columns so rows come back keyed by the declared name.
    if name == name.lower():
        return name
    return f'{name} AS "{name}"'


def projection(fields: Fields) -> str:
    """Column list for ``SELECT``/``RETURNING``: ``id`` followed by the fields."""
    return ", ".join(["id"] + [_select_column(field.name) for field in fields])


def build_insert(table: str, fields: Fields, values: Mapping[str, Any]) -> Query:
    columns = [field.name for field in fields]
    placeholders = ", ".join(["%s"] * len(columns))
    sql = (
        f"INSERT INTO {table} ({', '.join(columns)}) "
        f"VALUES ({placeholders}) RETURNING {projection(fields)}"
    )
    return sql, tuple(values.get(column) for column in columns)


def build_select_all(table: str, fields: Fields) -> Query:
    return f"SELECT {projection(fields)} FROM {table} ORDER BY id ASC", ()


def build_select_one(table: str, fields: Fields, user_id: int) -> Query:
    return f"SELECT {projection(fields)} FROM {table} WHERE id = %s", (user_id,)


def build_update(
    table: str,
    fields: Fields,
    pairs: Sequence[Tuple[str, Any]],
    user_id: int,
) -> Query:
    """Build an ``UPDATE`` touching only the columns in ``pairs``.

    ``pairs`` is an ordered sequence of ``(column, value)``.  Placeholders
    follow the sequence order and the identifier comes last.  Raises
    ``ValueError`` when ``pairs`` is empty, since ``SET`` needs at least
    one assignment.
    """
    if not pairs:
        raise ValueError("An update needs at least one column")
    assignments: List[str] = []
    params: List[Any] = []
    for column, value in pairs:
        assignments.append(f"{column} = %s")
        params.append(value)
    params.append(user_id)
    sql = (
        f"UPDATE {table} SET {', '.join(assignments)} "
        f"WHERE id = %s RETURNING {projection(fields)}"
    )
    return sql, tuple(params)


def build_delete(table: str, user_id: int) -> Query:
    return f"DELETE FROM {table} WHERE id = %s RETURNING id", (user_id,)
