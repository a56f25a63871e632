"""Data layer for the scoring engine.

This module provides storage and retrieval functionality including
database engine/session management, SQLAlchemy ORM models and the
ScoringStore implementation used by the jobs.

Submodules:
    db: Database engine and session management
    schema: Declarative base and shared column mixins
    models: SQLAlchemy ORM model definitions
    store: ScoringStore backed by SQLAlchemy

Example:
    >>> from pickem_engine.data import init_db, SqlScoringStore
    >>> init_db()
    >>> store = SqlScoringStore()
    >>> picks = store.get_picks_for_game("g-101")
"""
from __future__ import annotations

from pickem_engine.data.db import (
    get_engine,
    get_session,
    init_db,
    reset_engine,
    session_scope,
    verify_foreign_keys_enabled,
)
from pickem_engine.data.models import Award, Game, Pick
from pickem_engine.data.schema import Base, TimestampMixin, WeekMixin
from pickem_engine.data.store import SqlScoringStore

__all__ = [
    # Database utilities
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
    "session_scope",
    "verify_foreign_keys_enabled",
    # Base and mixins
    "Base",
    "TimestampMixin",
    "WeekMixin",
    # Models
    "Game",
    "Pick",
    "Award",
    # Store
    "SqlScoringStore",
]
