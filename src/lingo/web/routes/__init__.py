"""Route handlers for Web API."""

from lingo.web.routes.admin import router as admin_router
from lingo.web.routes.courses import router as courses_router
from lingo.web.routes.health import router as health_router
from lingo.web.routes.leaderboard import router as leaderboard_router
from lingo.web.routes.learn import router as learn_router
from lingo.web.routes.lessons import router as lessons_router
from lingo.web.routes.subscription import router as subscription_router

__all__ = [
    "admin_router",
    "courses_router",
    "health_router",
    "leaderboard_router",
    "learn_router",
    "lessons_router",
    "subscription_router",
]
