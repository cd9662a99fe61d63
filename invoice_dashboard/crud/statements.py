# invoice_dashboard/crud/statements.py
"""
Hand-written parameterized SQL for the raw-SQL backends.

Parameters are written as `:name`; the SQLAlchemy text() backend binds them
directly and the DB-API backend rewrites them to the driver's paramstyle.
SQL text must not contain literal colons or percent signs.
"""

from invoice_dashboard.services.aggregation import TOTALS_SQL

_TEXT_TYPE = {
    "mysql": "CHAR",
    "mariadb": "CHAR",
}


def text_type(dialect_name: str) -> str:
    """Target type of CAST(... AS <type>) that yields plain text."""
    return _TEXT_TYPE.get(dialect_name, "TEXT")


def _like(expr: str) -> str:
    return f"LOWER({expr}) LIKE :pattern ESCAPE '!'"


def customer_where() -> str:
    return "(" + " OR ".join([_like("c.name"), _like("c.email")]) + ")"


def invoice_where(dialect_name: str) -> str:
    t = text_type(dialect_name)
    return "(" + " OR ".join([
        _like("c.name"),
        _like("c.email"),
        _like(f"CAST(i.amount AS {t})"),
        _like(f"CAST(i.date AS {t})"),
        _like("i.status"),
    ]) + ")"


PAGE = " LIMIT :limit OFFSET :offset"

# -----------------------------------------------------
# Customers
# -----------------------------------------------------
CUSTOMER_EMAIL_OWNER = "SELECT id FROM customers WHERE email = :email"

CUSTOMER_INSERT = (
    "INSERT INTO customers (id, name, email, image_url) "
    "VALUES (:id, :name, :email, :image_url)"
)

CUSTOMER_UPDATE = (
    "UPDATE customers SET name = :name, email = :email, image_url = :image_url "
    "WHERE id = :id"
)

CUSTOMER_DELETE = "DELETE FROM customers WHERE id = :id"

CUSTOMER_BY_ID = "SELECT id, name, email, image_url FROM customers WHERE id = :id"

CUSTOMER_INVOICE_COUNT = "SELECT COUNT(*) FROM invoices WHERE customer_id = :id"

CUSTOMERS_ALL = "SELECT id, name FROM customers ORDER BY name ASC, id ASC"

CUSTOMER_COUNT_ALL = "SELECT COUNT(*) FROM customers"


def customers_with_totals(paged: bool) -> str:
    sql = (
        f"SELECT c.id AS id, c.name AS name, c.email AS email, c.image_url AS image_url, {TOTALS_SQL} "
        "FROM customers c "
        "LEFT JOIN invoices i ON i.customer_id = c.id "
        f"WHERE {customer_where()} "
        "GROUP BY c.id, c.name, c.email, c.image_url "
        "ORDER BY c.name ASC, c.id ASC"
    )
    return sql + PAGE if paged else sql


def customers_count() -> str:
    return f"SELECT COUNT(*) FROM customers c WHERE {customer_where()}"


# -----------------------------------------------------
# Invoices
# -----------------------------------------------------
INVOICE_INSERT = (
    "INSERT INTO invoices (id, customer_id, amount, status, date) "
    "VALUES (:id, :customer_id, :amount, :status, :date)"
)

INVOICE_UPDATE = (
    "UPDATE invoices SET customer_id = :customer_id, amount = :amount, status = :status "
    "WHERE id = :id"
)

INVOICE_DELETE = "DELETE FROM invoices WHERE id = :id"

INVOICE_BY_ID = "SELECT id, customer_id, amount, status, date FROM invoices WHERE id = :id"

INVOICE_COUNT_ALL = "SELECT COUNT(*) FROM invoices"

INVOICE_TOTAL_BY_STATUS = "SELECT COALESCE(SUM(amount), 0) FROM invoices WHERE status = :status"

INVOICES_LATEST = (
    "SELECT i.id AS id, i.amount AS amount, "
    "c.name AS name, c.email AS email, c.image_url AS image_url "
    "FROM invoices i JOIN customers c ON i.customer_id = c.id "
    "ORDER BY i.date DESC, i.id DESC LIMIT :limit"
)


def invoices_filtered(dialect_name: str, paged: bool) -> str:
    sql = (
        "SELECT i.id AS id, i.amount AS amount, i.date AS date, i.status AS status, "
        "c.name AS name, c.email AS email, c.image_url AS image_url "
        "FROM invoices i JOIN customers c ON i.customer_id = c.id "
        f"WHERE {invoice_where(dialect_name)} "
        "ORDER BY i.date DESC, i.id DESC"
    )
    return sql + PAGE if paged else sql


def invoices_count(dialect_name: str) -> str:
    return (
        "SELECT COUNT(*) FROM invoices i JOIN customers c ON i.customer_id = c.id "
        f"WHERE {invoice_where(dialect_name)}"
    )


# -----------------------------------------------------
# Users / Revenue
# -----------------------------------------------------
USER_BY_EMAIL = "SELECT id, name, email, password FROM users WHERE email = :email"

REVENUE_ALL = "SELECT month, revenue FROM revenue"
