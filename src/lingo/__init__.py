"""lingo: request-scoped data access for a language-learning app."""

__version__ = "0.1.0"
