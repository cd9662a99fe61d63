"""
Free-text search filter.

A single term is matched, case-insensitively and as a substring, against
several columns of mixed type. Every backend renders the same test:
`LOWER(CAST(column AS text)) LIKE :pattern ESCAPE '!'`, where the pattern
is the lower-cased term with LIKE wildcards escaped. `matches()` is the
in-memory form of that test and agrees with it row by row.

Column projections to text:
    - amount: the stored integer cents as decimal digits ("15795")
    - date:   ISO YYYY-MM-DD
    - status, name, email: as stored
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

LIKE_ESCAPE = "!"


def escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def as_search_text(value: Any) -> str:
    """Text projection of a column value, the way the store casts it."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return str(value)


@dataclass(frozen=True)
class SearchFilter:
    term: str = ""

    @classmethod
    def build(cls, query: Optional[str]) -> "SearchFilter":
        return cls((query or "").strip().lower())

    @property
    def is_empty(self) -> bool:
        return self.term == ""

    @property
    def pattern(self) -> str:
        """LIKE pattern, `%term%` with the term's wildcards escaped."""
        return f"%{escape_like(self.term)}%"

    def matches(self, *values: Any) -> bool:
        """True when any value's text projection contains the term."""
        if self.is_empty:
            return True
        return any(self.term in as_search_text(v).lower() for v in values)

    def matches_customer(self, name: str, email: str) -> bool:
        return self.matches(name, email)

    def matches_invoice(self, name: str, email: str, status: Any, amount: int, invoice_date: Any) -> bool:
        return self.matches(name, email, status, amount, invoice_date)
