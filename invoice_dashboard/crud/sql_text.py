# invoice_dashboard/crud/sql_text.py
"""
Raw-SQL backend over SQLAlchemy text(): hand-written statements, bound and
executed by the engine's own driver (PyMySQL for mysql+pymysql URLs).
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from invoice_dashboard.core.database import Database
from invoice_dashboard.crud.raw import SqlRunner, SqlTransaction


class TextTransaction(SqlTransaction):

    def __init__(self, conn: Connection):
        self.conn = conn

    def all(self, statement: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        result = self.conn.execute(text(statement), params or {})
        return [dict(row._mapping) for row in result]

    def execute(self, statement: str, params: Optional[Dict[str, Any]] = None) -> int:
        return self.conn.execute(text(statement), params or {}).rowcount


class TextSqlRunner(SqlRunner):

    def __init__(self, database: Database):
        self.database = database
        self.dialect_name = database.dialect_name

    @contextmanager
    def transaction(self) -> Iterator[TextTransaction]:
        with self.database.connect() as conn:
            yield TextTransaction(conn)

    @property
    def integrity_errors(self):
        return (IntegrityError,)
