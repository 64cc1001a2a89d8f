"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health and auth routers are
open (no auth required); /me asks for the identity itself.
"""

from fastapi import APIRouter, Depends

from bookshelf.api.auth import router as auth_router
from bookshelf.api.health import router as health_router
from bookshelf.api.records import books_router, movies_router
from bookshelf.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter()

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid Bearer JWT
api_router.include_router(books_router, tags=["books"], dependencies=_auth)
api_router.include_router(movies_router, tags=["movies"], dependencies=_auth)
