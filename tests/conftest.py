"""
Pytest configuration for the User Records API.

Provides fixtures for:
- An in-memory SQLite store that runs the exact SQL produced by
  ``core.queries`` (``%s`` placeholders are rewritten to ``?``)
- Test settings
- A ``TestClient`` bound to an application using that store
"""

from __future__ import annotations

import sqlite3
from typing import Any, Callable, Dict, Generator, List, Optional, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient

from user_records_api.app.core.config import Settings
from user_records_api.app.core.errors import StoreError
from user_records_api.app.main import create_app
from user_records_api.app.schemas.fields import NUMBER, SCHEMA_VARIANTS, Fields


class SQLiteUserStore:
    """Drop-in replacement for ``UserStore`` backed by SQLite.

    Every executed statement is recorded in ``statements`` so tests can
    assert that rejected requests never reached the store.  Setting
    ``fail_with`` makes the next statements raise ``StoreError``.
    """

    def __init__(self, fields: Fields, table: str = "users") -> None:
        self.fields = fields
        self.table = table
        self.statements: List[str] = []
        self.fail_with: Optional[str] = None
        self.open_error: Optional[str] = None
        self.opened = False
        self.closed = False
        self.conn = sqlite3.connect(":memory:", check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        columns = ", ".join(
            f"{field.name} {'NUMERIC' if field.kind == NUMBER else 'TEXT'}"
            f"{' NOT NULL' if field.required else ''}"
            for field in fields
        )
        self.conn.execute(f"CREATE TABLE {table} (id INTEGER PRIMARY KEY AUTOINCREMENT, {columns})")
        self.conn.commit()

    async def open(self) -> None:
        if self.open_error:
            raise StoreError(self.open_error)
        await self.fetch_one("SELECT 1 AS ok")
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    def _execute(self, query: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        self.statements.append(query)
        if self.fail_with:
            raise StoreError(self.fail_with)
        try:
            cursor = self.conn.execute(query.replace("%s", "?"), tuple(params))
            rows = [dict(row) for row in cursor.fetchall()]
            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            raise StoreError(str(exc)) from exc
        return rows

    async def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        return self._execute(query, params)

    async def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = self._execute(query, params)
        return rows[0] if rows else None

    def raw_row(self, user_id: int) -> Optional[Dict[str, Any]]:
        row = self.conn.execute(f"SELECT * FROM {self.table} WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        log_level="DEBUG",
        db_host="localhost",
        db_name="users_test",
        users_table="users",
        user_schema="name_age_occupation",
    )


@pytest.fixture
def fields() -> Fields:
    return SCHEMA_VARIANTS["name_age_occupation"]


@pytest.fixture
def store(fields: Fields) -> Generator[SQLiteUserStore, None, None]:
    sqlite_store = SQLiteUserStore(fields)
    try:
        yield sqlite_store
    finally:
        sqlite_store.conn.close()


@pytest.fixture
def client(test_settings: Settings, store: SQLiteUserStore, fields: Fields) -> Generator[TestClient, None, None]:
    app = create_app(test_settings, user_store=store, fields=fields)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_client(
    test_settings: Settings,
) -> Generator[Callable[[str], Tuple[TestClient, SQLiteUserStore]], None, None]:
    """Build clients for other schema variants; returns ``(client, store)``."""
    opened = []

    def _make(variant: str):
        variant_fields = SCHEMA_VARIANTS[variant]
        variant_store = SQLiteUserStore(variant_fields)
        app = create_app(test_settings, user_store=variant_store, fields=variant_fields)
        test_client = TestClient(app)
        test_client.__enter__()
        opened.append((test_client, variant_store))
        return test_client, variant_store

    yield _make

    for test_client, variant_store in opened:
        test_client.__exit__(None, None, None)
        variant_store.conn.close()
