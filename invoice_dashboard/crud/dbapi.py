# invoice_dashboard/crud/dbapi.py
"""
Raw-SQL backend over a plain PEP 249 driver (PyMySQL in production).

Statements are written with `:name` parameters and rewritten here to the
driver's paramstyle before execution.
"""

import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from invoice_dashboard.core.database import DbApiConnector
from invoice_dashboard.crud.raw import SqlRunner, SqlTransaction

logger = logging.getLogger(__name__)

_PARAM = re.compile(r":(\w+)")

Params = Union[Dict[str, Any], Sequence[Any]]


def to_paramstyle(statement: str, params: Dict[str, Any], paramstyle: str) -> Tuple[str, Params]:
    """
    Rewrites `:name` placeholders for a DB-API paramstyle.

    Examples:
        >>> to_paramstyle("SELECT 1 WHERE a = :a OR b = :a", {"a": 1}, "qmark")
        ('SELECT 1 WHERE a = ? OR b = ?', [1, 1])
    """
    if paramstyle == "named":
        return statement, params
    if paramstyle == "pyformat":
        return _PARAM.sub(r"%(\1)s", statement), params

    names = _PARAM.findall(statement)
    values = [params[name] for name in names]
    if paramstyle == "qmark":
        return _PARAM.sub("?", statement), values
    if paramstyle == "format":
        return _PARAM.sub("%s", statement), tuple(values)
    if paramstyle == "numeric":
        counter = iter(range(1, len(names) + 1))
        return _PARAM.sub(lambda _: f":{next(counter)}", statement), values
    raise ValueError(f"Unsupported DB-API paramstyle '{paramstyle}'")


class DbApiTransaction(SqlTransaction):

    def __init__(self, conn: Any, paramstyle: str):
        self.conn = conn
        self.paramstyle = paramstyle

    def _run(self, statement: str, params: Optional[Dict[str, Any]]):
        cursor = self.conn.cursor()
        if params:
            query, args = to_paramstyle(statement, params, self.paramstyle)
            cursor.execute(query, args)
        else:
            cursor.execute(statement)
        return cursor

    def all(self, statement: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        cursor = self._run(statement, params)
        try:
            names = [column[0] for column in cursor.description]
            return [dict(zip(names, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def execute(self, statement: str, params: Optional[Dict[str, Any]] = None) -> int:
        cursor = self._run(statement, params)
        try:
            return cursor.rowcount
        finally:
            cursor.close()


class DbApiRunner(SqlRunner):

    def __init__(self, connector: DbApiConnector):
        self.connector = connector
        self.dialect_name = connector.dialect_name

    @contextmanager
    def transaction(self) -> Iterator[DbApiTransaction]:
        with self.connector.connection() as conn:
            yield DbApiTransaction(conn, self.connector.paramstyle)

    @property
    def integrity_errors(self):
        return (self.connector.integrity_error,)
