"""Shared fixtures: isolated SQLite database and a seeded catalog."""

from __future__ import annotations

from typing import Any

import pytest

from lingo.config.app_config import clear_config_cache
from lingo.db import database
from lingo.db.database import get_db, init_db
from lingo.db.seed import insert_challenge_progress, seed_catalog


def catalog_data() -> dict[str, Any]:
    """Spanish course with two units; units listed out of order on purpose.

    Unit 1: L1 (2 challenges), L2 (1 challenge), Empty (0 challenges)
    Unit 2: L3 (3 challenges)
    """
    return {
        "courses": [
            {
                "title": "Spanish",
                "image_src": "/es.svg",
                "units": [
                    {
                        "title": "Unit 2",
                        "description": "Phrases",
                        "order": 2,
                        "lessons": [
                            {
                                "title": "L3",
                                "challenges": [
                                    {"type": "ASSIST", "question": "q3a"},
                                    {"type": "SELECT", "question": "q3b"},
                                    {"type": "SELECT", "question": "q3c"},
                                ],
                            }
                        ],
                    },
                    {
                        "title": "Unit 1",
                        "description": "Basics",
                        "order": 1,
                        "lessons": [
                            {
                                "title": "Empty",
                                "order": 3,
                            },
                            {
                                "title": "L1",
                                "order": 1,
                                "challenges": [
                                    {
                                        "type": "SELECT",
                                        "question": "q1b",
                                        "order": 2,
                                        "options": [
                                            {"text": "el hombre", "correct": True},
                                            {"text": "la mujer"},
                                        ],
                                    },
                                    {"type": "SELECT", "question": "q1a", "order": 1},
                                ],
                            },
                            {
                                "title": "L2",
                                "order": 2,
                                "challenges": [{"type": "SELECT", "question": "q2a"}],
                            },
                        ],
                    },
                ],
            },
            {"title": "French", "image_src": "/fr.svg"},
        ],
        "users": [
            {"user_id": "user_1", "user_name": "Ana", "active_course": "Spanish", "points": 10},
            {"user_id": "user_2", "user_name": "Luis", "points": 50},
        ],
        "admins": ["admin_1"],
    }


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Fresh database in tmp_path, default config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LINGO_DB_PATH", raising=False)
    monkeypatch.setattr(database, "_db_path", None)
    clear_config_cache()

    path = tmp_path / "test.db"
    init_db(path)
    yield path

    clear_config_cache()


@pytest.fixture
def catalog(db_path):
    """Seeded catalog. Returns ids keyed by course/unit/lesson title and question."""
    seed_catalog(catalog_data())

    ids: dict[str, int] = {}
    with get_db() as conn:
        for table, column in (
            ("courses", "title"),
            ("units", "title"),
            ("lessons", "title"),
            ("challenges", "question"),
        ):
            for row in conn.execute(f"SELECT id, {column} FROM {table}"):
                ids[row[column]] = row["id"]
    return ids


@pytest.fixture
def mark(catalog):
    """Record progress rows: mark("user_1", "q1a", "q1b", completed=True)."""

    def _mark(user_id: str, *questions: str, completed: bool = True) -> None:
        with get_db() as conn:
            for question in questions:
                insert_challenge_progress(conn, user_id, catalog[question], completed)

    return _mark
