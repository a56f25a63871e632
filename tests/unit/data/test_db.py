"""Tests for database engine and session management.

Tests the database connection utilities in pickem_engine.data.db including
engine creation, session management, and database initialization.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Generator

import pytest
from sqlalchemy import inspect, select, text
from sqlalchemy.exc import IntegrityError

from pickem_engine.config import reset_settings
from pickem_engine.data import (
    Game,
    get_engine,
    get_session,
    init_db,
    reset_engine,
    session_scope,
    verify_foreign_keys_enabled,
)

if TYPE_CHECKING:
    from pickem_engine.config import Settings


@pytest.fixture(autouse=True)
def reset_db_between_tests(test_settings: "Settings") -> Generator[None, None, None]:
    """Reset database engine before and after each test."""
    reset_engine()
    yield
    reset_engine()


def _game(game_id: str, **kwargs) -> Game:
    values = {"week": 1, "season": 2025, "home_team": "KC", "away_team": "DEN"}
    values.update(kwargs)
    return Game(id=game_id, **values)


class TestGetEngine:
    """Tests for get_engine() function."""

    def test_get_engine_creates_from_settings(
        self, test_settings: "Settings"
    ) -> None:
        """Engine should be created from settings.db_path."""
        engine = get_engine()
        assert str(test_settings.db_path) in str(engine.url)

    def test_get_engine_caches_engine(self, test_settings: "Settings") -> None:
        """Engine should be cached on subsequent calls."""
        assert get_engine() is get_engine()

    def test_get_engine_creates_parent_directories(self, tmp_path: Path) -> None:
        """Engine should create parent directories for database file."""
        nested_path = tmp_path / "deep" / "nested" / "pickem.db"
        os.environ["PICKEM_DB_PATH"] = str(nested_path)
        reset_settings()
        reset_engine()

        try:
            get_engine()
            assert nested_path.parent.exists()
        finally:
            os.environ.pop("PICKEM_DB_PATH", None)
            reset_settings()

    def test_store_timeout_applies_to_pool(self, test_settings: "Settings") -> None:
        """The pool wait should use the configured store timeout."""
        engine = get_engine()
        assert engine.pool.timeout() == test_settings.store_timeout


class TestGetSession:
    """Tests for get_session() function."""

    def test_get_session_returns_session(self, test_settings: "Settings") -> None:
        session = get_session()
        assert session.execute(text("SELECT 1")).scalar() == 1
        session.close()

    def test_get_session_is_scoped(self, test_settings: "Settings") -> None:
        """Sessions from same thread should be the same instance."""
        assert get_session() is get_session()


class TestSessionScope:
    """Tests for session_scope() context manager."""

    def test_session_scope_commits_on_success(
        self, test_settings: "Settings"
    ) -> None:
        init_db()

        with session_scope() as session:
            session.add(_game("g1"))

        with session_scope() as session:
            assert session.get(Game, "g1") is not None

    def test_session_scope_rolls_back_on_exception(
        self, test_settings: "Settings"
    ) -> None:
        """A failing flush should discard everything in the transaction."""
        init_db()

        with pytest.raises(IntegrityError):
            with session_scope() as session:
                session.add(_game("g2"))
                session.flush()
                # Same team on both sides violates a check constraint
                session.add(_game("g3", away_team="KC"))
                session.flush()

        with session_scope() as session:
            assert session.scalars(select(Game)).all() == []


class TestInitDb:
    """Tests for init_db() function."""

    def test_init_db_creates_all_tables(self, test_settings: "Settings") -> None:
        init_db()

        tables = inspect(get_engine()).get_table_names()

        for table in ["games", "picks", "awards"]:
            assert table in tables, f"Table '{table}' not found in database"

    def test_init_db_idempotent(self, test_settings: "Settings") -> None:
        """init_db should be safe to call multiple times."""
        init_db()
        init_db()

        assert "picks" in inspect(get_engine()).get_table_names()


class TestSQLitePragmas:
    """Tests for SQLite-specific configuration."""

    def test_foreign_keys_enabled(self, test_settings: "Settings") -> None:
        init_db()
        assert verify_foreign_keys_enabled() is True

    def test_wal_mode_enabled(self, test_settings: "Settings") -> None:
        init_db()
        with get_engine().connect() as conn:
            mode = conn.execute(text("PRAGMA journal_mode")).scalar()
        assert mode == "wal", f"Expected WAL mode, got {mode}"


class TestResetEngine:
    """Tests for reset_engine() function."""

    def test_reset_engine_clears_cache(self, test_settings: "Settings") -> None:
        engine1 = get_engine()
        reset_engine()
        assert get_engine() is not engine1

    def test_engine_follows_db_path_change(self, tmp_path: Path) -> None:
        """Changing PICKEM_DB_PATH should rebuild the engine on next use."""
        engine1 = get_engine()
        other = tmp_path / "other.db"
        os.environ["PICKEM_DB_PATH"] = str(other)
        reset_settings()

        try:
            engine2 = get_engine()
            assert engine2 is not engine1
            assert str(other) in str(engine2.url)
        finally:
            os.environ.pop("PICKEM_DB_PATH", None)
            reset_settings()
