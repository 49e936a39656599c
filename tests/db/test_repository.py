"""Tests for row loaders."""

from datetime import datetime, timezone

from lingo.db.database import get_db
from lingo.db.repository import (
    fetch_course,
    fetch_courses,
    fetch_is_admin,
    fetch_lesson,
    fetch_top_users,
    fetch_units_tree,
    fetch_user_progress,
    parse_timestamp,
)
from lingo.db.seed import insert_user_progress


class TestFetchUnitsTree:
    """Tests for fetch_units_tree."""

    def test_units_ordered_by_order_field(self, catalog):
        with get_db() as conn:
            units = fetch_units_tree(conn, catalog["Spanish"], "user_1")
        assert [u.title for u in units] == ["Unit 1", "Unit 2"]

    def test_lessons_and_challenges_ordered(self, catalog):
        with get_db() as conn:
            units = fetch_units_tree(conn, catalog["Spanish"], "user_1")

        unit_1 = units[0]
        assert [l.title for l in unit_1.lessons] == ["L1", "L2", "Empty"]
        assert [c.question for c in unit_1.lessons[0].challenges] == ["q1a", "q1b"]
        assert unit_1.lessons[2].challenges == []

    def test_progress_filtered_by_user(self, catalog, mark):
        mark("user_1", "q1a")
        mark("user_2", "q1b")

        with get_db() as conn:
            units = fetch_units_tree(conn, catalog["Spanish"], "user_1")

        q1a, q1b = units[0].lessons[0].challenges
        assert [p.user_id for p in q1a.challenge_progress] == ["user_1"]
        assert q1b.challenge_progress == []

    def test_course_without_units(self, catalog):
        with get_db() as conn:
            assert fetch_units_tree(conn, catalog["French"], "user_1") == []


class TestFetchLesson:
    """Tests for fetch_lesson."""

    def test_loads_options_and_progress(self, catalog, mark):
        mark("user_1", "q1b", completed=False)

        with get_db() as conn:
            lesson = fetch_lesson(conn, catalog["L1"], "user_1")

        q1a, q1b = lesson.challenges
        assert q1a.challenge_options == []
        assert [o.text for o in q1b.challenge_options] == ["el hombre", "la mujer"]
        assert [o.correct for o in q1b.challenge_options] == [True, False]
        assert [p.completed for p in q1b.challenge_progress] == [False]

    def test_missing_lesson(self, catalog):
        with get_db() as conn:
            assert fetch_lesson(conn, 9999, "user_1") is None


class TestFetchCourse:
    """Tests for fetch_course and fetch_courses."""

    def test_fetch_courses(self, catalog):
        with get_db() as conn:
            courses = fetch_courses(conn)
        assert [c.title for c in courses] == ["Spanish", "French"]
        assert all(c.units == [] for c in courses)

    def test_with_units_loads_lessons_without_challenges(self, catalog):
        with get_db() as conn:
            course = fetch_course(conn, catalog["Spanish"], with_units=True)
        assert [u.title for u in course.units] == ["Unit 1", "Unit 2"]
        assert [l.title for l in course.units[0].lessons] == ["L1", "L2", "Empty"]
        assert course.units[0].lessons[0].challenges == []

    def test_missing_course(self, catalog):
        with get_db() as conn:
            assert fetch_course(conn, 9999) is None


class TestUserState:
    """Tests for user progress, leaderboard and admin loaders."""

    def test_user_progress_with_active_course(self, catalog):
        with get_db() as conn:
            progress = fetch_user_progress(conn, "user_1")
        assert progress.active_course_id == catalog["Spanish"]
        assert progress.active_course.title == "Spanish"
        assert progress.hearts == 5

    def test_user_progress_without_active_course(self, catalog):
        with get_db() as conn:
            progress = fetch_user_progress(conn, "user_2")
        assert progress.active_course_id is None
        assert progress.active_course is None

    def test_top_users_sorted_and_limited(self, catalog):
        with get_db() as conn:
            for i in range(12):
                insert_user_progress(conn, f"extra_{i:02d}", points=i)
            top = fetch_top_users(conn, 10)

        assert len(top) == 10
        points = [entry.points for entry in top]
        assert points == sorted(points, reverse=True)
        assert top[0].user_id == "user_2"

    def test_is_admin(self, catalog):
        with get_db() as conn:
            assert fetch_is_admin(conn, "admin_1") is True
            assert fetch_is_admin(conn, "user_1") is False


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_naive_is_utc(self):
        parsed = parse_timestamp("2024-05-01T12:00:00")
        assert parsed == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_keeps_offset(self):
        parsed = parse_timestamp("2024-05-01T12:00:00+02:00")
        assert parsed.utcoffset().total_seconds() == 7200
