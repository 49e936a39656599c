"""Identity resolution and request scoping."""

from lingo.auth.middleware import IdentityMiddleware, is_protected_path
from lingo.auth.request_scope import (
    RequestScope,
    current_user_id,
    get_current_scope,
    request_cached,
    request_scope,
)

__all__ = [
    "IdentityMiddleware",
    "RequestScope",
    "current_user_id",
    "get_current_scope",
    "is_protected_path",
    "request_cached",
    "request_scope",
]
