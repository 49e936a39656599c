"""Database module for SQLite persistence.

Provides:
- Database connection management and schema initialization (database)
- Record types (models)
- Row loaders with nested eager loading (repository)
- Request-scoped read queries (queries)
- Seeding from YAML (seed)
"""

from lingo.db.database import get_db, init_db

__all__ = ["get_db", "init_db"]
