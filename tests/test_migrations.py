from __future__ import annotations

import importlib.util
from pathlib import Path

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

from weekly_planner.db import Base
from weekly_planner.db import models  # noqa: F401

MIGRATION = (
    Path(__file__).resolve().parents[1]
    / "weekly_planner"
    / "db"
    / "migrations"
    / "versions"
    / "20240605_000001_initial_schema.py"
)


def _load_migration():
    spec = importlib.util.spec_from_file_location("initial_schema", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_initial_migration_matches_models() -> None:
    migration = _load_migration()
    engine = sa.create_engine("sqlite://")

    with engine.begin() as conn:
        context = MigrationContext.configure(conn)
        with Operations.context(context):
            migration.upgrade()
        inspector = sa.inspect(conn)
        tables = set(inspector.get_table_names())
        assert tables == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            columns = {column["name"] for column in inspector.get_columns(name)}
            assert columns == set(table.columns.keys()), name

        uniques = {
            tuple(constraint["column_names"])
            for constraint in inspector.get_unique_constraints("weekly_plans")
        }
        assert ("teacher_id", "subject_id", "grade_id", "week_id") in uniques

        with Operations.context(context):
            migration.downgrade()
        assert sa.inspect(conn).get_table_names() == []
