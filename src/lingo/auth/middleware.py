"""Identity middleware.

Authentication happens upstream (identity provider / gateway), which
forwards the opaque user id in a trusted header. This middleware reads it
for every non-static path and opens a request scope around the request.
Static asset paths get an anonymous scope.
"""

from __future__ import annotations

from typing import Iterable

import structlog
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from lingo.auth.request_scope import request_scope
from lingo.config.app_config import load_app_config

logger = structlog.get_logger(__name__)


def is_protected_path(path: str, excluded_paths: Iterable[str]) -> bool:
    """Check whether identity resolution applies to ``path``.

    Args:
        path: Request path, e.g. "/api/learn/units"
        excluded_paths: Static asset prefixes, e.g. "/_next/static"

    Returns:
        False if the path starts with any excluded prefix.
    """
    return not any(path.startswith(prefix) for prefix in excluded_paths)


class IdentityMiddleware:
    """ASGI middleware binding the request's user id to a request scope."""

    def __init__(
        self,
        app: ASGIApp,
        user_header: str | None = None,
        excluded_paths: list[str] | None = None,
    ) -> None:
        auth = load_app_config().auth
        self.app = app
        self.user_header = user_header or auth.user_header
        self.excluded_paths = (
            excluded_paths if excluded_paths is not None else auth.excluded_paths
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        user_id = None
        if is_protected_path(scope["path"], self.excluded_paths):
            user_id = Headers(scope=scope).get(self.user_header) or None
            logger.debug(
                "identity.resolved",
                path=scope["path"],
                authenticated=user_id is not None,
            )

        with request_scope(user_id):
            await self.app(scope, receive, send)
