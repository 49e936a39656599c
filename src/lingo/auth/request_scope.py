"""Request-scoped identity and memoization.

A request scope binds the caller's user id and an empty memo cache to the
current context. Functions decorated with ``request_cached`` compute once
per distinct argument tuple inside a scope, so dependent reads in the same
request share one snapshot. Nothing is cached across scopes, and calls made
outside any scope are not cached at all.

Cached results are shared, not copied: every caller in the scope gets the
same object. Treat them as read-only and derive changed values with
``dataclasses.replace``; mutating one in place changes what later calls in
the same request see.

Usage:
    with request_scope("user_123"):
        progress = get_user_progress()
        assert get_user_progress() is progress
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Generator, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class RequestScope:
    """Identity and memo cache for one request."""

    user_id: str | None = None
    cache: dict[tuple, Any] = field(default_factory=dict)


_current_scope: ContextVar[RequestScope | None] = ContextVar(
    "lingo_request_scope", default=None
)


@contextmanager
def request_scope(user_id: str | None = None) -> Generator[RequestScope, None, None]:
    """Open a request scope for ``user_id`` (None for anonymous requests)."""
    scope = RequestScope(user_id=user_id or None)
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)


def get_current_scope() -> RequestScope | None:
    """Return the active request scope, if any."""
    return _current_scope.get()


def current_user_id() -> str | None:
    """Return the user id bound to the active scope, or None."""
    scope = _current_scope.get()
    return scope.user_id if scope is not None else None


def request_cached(func: F) -> F:
    """Memoize ``func`` per request scope, keyed on its arguments.

    Repeat calls return the identical cached object, which callers must not
    mutate.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        scope = _current_scope.get()
        if scope is None:
            return func(*args, **kwargs)

        key = (func.__module__, func.__qualname__, args, tuple(sorted(kwargs.items())))
        if key in scope.cache:
            return scope.cache[key]

        result = func(*args, **kwargs)
        scope.cache[key] = result
        return result

    return wrapper  # type: ignore[return-value]
