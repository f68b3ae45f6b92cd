# This file makes the 'routes' directory a Python package.

from fastapi import APIRouter

from .auth_routes import router as auth_router
from .course_routes import router as course_router
from .learning_routes import router as learning_router
from .badge_routes import router as badge_router
from .admin_routes import router as admin_router


def build_api_router(prefix: str = "/api/v1") -> APIRouter:
    """Collects every router under the versioned API prefix."""
    api_router = APIRouter(prefix=prefix)

    # User-facing routes
    api_router.include_router(auth_router)
    api_router.include_router(course_router)
    api_router.include_router(learning_router)
    api_router.include_router(badge_router)

    # Admin routes are prefixed with /admin in admin_routes.py
    api_router.include_router(admin_router)
    return api_router


__all__ = [
    "build_api_router",
]
