"""Tests for database connection and schema."""

import sqlite3

import pytest

from lingo.db.database import get_db, get_db_path, init_db

TABLES = {
    "courses",
    "units",
    "lessons",
    "challenges",
    "challenge_options",
    "challenge_progress",
    "user_progress",
    "user_subscription",
    "admin",
}


class TestInitDb:
    """Tests for init_db."""

    def test_creates_all_tables(self, db_path):
        with get_db() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            ).fetchall()
        assert TABLES <= {row["name"] for row in rows}

    def test_is_idempotent(self, db_path):
        init_db(db_path)
        init_db(db_path)
        assert get_db_path() == db_path

    def test_creates_parent_directory(self, db_path, tmp_path):
        nested = tmp_path / "nested" / "dir" / "lingo.db"
        init_db(nested)
        assert nested.exists()


class TestGetDb:
    """Tests for get_db."""

    def test_commits_on_success(self, db_path):
        with get_db() as conn:
            conn.execute("INSERT INTO admin (user_id) VALUES ('a')")
        with get_db() as conn:
            assert conn.execute("SELECT COUNT(*) FROM admin").fetchone()[0] == 1

    def test_rolls_back_on_error(self, db_path):
        with pytest.raises(RuntimeError):
            with get_db() as conn:
                conn.execute("INSERT INTO admin (user_id) VALUES ('a')")
                raise RuntimeError("boom")
        with get_db() as conn:
            assert conn.execute("SELECT COUNT(*) FROM admin").fetchone()[0] == 0

    def test_foreign_keys_enforced(self, db_path):
        with pytest.raises(sqlite3.IntegrityError):
            with get_db() as conn:
                conn.execute(
                    'INSERT INTO units (title, description, course_id, "order") '
                    "VALUES ('u', 'd', 999, 1)"
                )
