from __future__ import annotations

import sqlite3

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from expense_tracker.core.config import get_settings
from expense_tracker.core.errors import StorageUnavailableError


class Base(DeclarativeBase):
    pass


settings = get_settings()
engine = create_engine(
    settings.db_url,
    connect_args={"check_same_thread": False} if settings.is_sqlite else {},
)


@event.listens_for(Engine, "connect")
def set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.execute("PRAGMA journal_mode=WAL;")
    cursor.execute("PRAGMA busy_timeout=5000;")
    cursor.execute("PRAGMA synchronous=NORMAL;")
    cursor.close()


SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)


def _sqlite_columns(conn, table: str) -> set[str]:
    rows = conn.execute(text(f"PRAGMA table_info({table})")).fetchall()
    return {str(row[1]) for row in rows}


def _has_unique_index(conn, table: str, column: str) -> bool:
    """True when a single-column unique index (named or constraint autoindex) covers ``column``."""
    for index in conn.execute(text(f"PRAGMA index_list({table})")).fetchall():
        if not index[2]:
            continue
        index_cols = conn.execute(text(f'PRAGMA index_info("{index[1]}")')).fetchall()
        if [str(row[2]) for row in index_cols] == [column]:
            return True
    return False


def ensure_runtime_schema() -> None:
    """Upgrade an expenses table created before idempotency keys and timestamps existed."""
    if engine.dialect.name != "sqlite":
        return
    with engine.begin() as conn:
        expense_cols = _sqlite_columns(conn, "expenses")
        if not expense_cols:
            return
        if "idempotency_key" not in expense_cols:
            conn.execute(text("ALTER TABLE expenses ADD COLUMN idempotency_key VARCHAR(255)"))
        # SQLite cannot add a column with a non-constant default, so backfill instead.
        for column in ("created_at", "updated_at"):
            if column not in expense_cols:
                conn.execute(text(f"ALTER TABLE expenses ADD COLUMN {column} DATETIME"))
                conn.execute(text(f"UPDATE expenses SET {column} = CURRENT_TIMESTAMP WHERE {column} IS NULL"))
        if not _has_unique_index(conn, "expenses", "idempotency_key"):
            conn.execute(
                text(
                    """
                    CREATE UNIQUE INDEX uq_expenses_idempotency_key
                    ON expenses(idempotency_key)
                    """
                )
            )
        conn.execute(text("CREATE INDEX IF NOT EXISTS ix_expenses_date ON expenses(date)"))
        conn.execute(text("CREATE INDEX IF NOT EXISTS ix_expenses_category ON expenses(category)"))


def verify_store_connection() -> None:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise StorageUnavailableError(f"Expense store unreachable: {exc.__class__.__name__}") from exc

