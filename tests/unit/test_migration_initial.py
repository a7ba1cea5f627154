from __future__ import annotations

import importlib.util
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

import expense_tracker.db.base as db_base
import expense_tracker.db.models  # noqa: F401

VERSIONS_DIR = Path(db_base.__file__).parent / "migrations" / "versions"


def _load_revision(filename: str):
    spec = importlib.util.spec_from_file_location(f"revision_{filename[:-3]}", VERSIONS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_initial_revision_matches_orm_schema(tmp_path) -> None:
    revision = _load_revision("0001_initial.py")
    assert revision.down_revision is None

    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'migrated.db'}")
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            revision.upgrade()

    inspector = inspect(engine)
    columns = {column["name"] for column in inspector.get_columns("expenses")}
    assert columns == set(db_base.Base.metadata.tables["expenses"].columns.keys())
    unique = inspector.get_unique_constraints("expenses")
    assert any(constraint["column_names"] == ["idempotency_key"] for constraint in unique)

    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            revision.downgrade()
    assert not inspect(engine).has_table("expenses")
    engine.dispose()
