"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Reads are open. Writes declare a CurrentIdentity dependency on
the individual route, so GET /posts and POST /posts can share a prefix
while only the second one requires a bearer token.
"""

from fastapi import APIRouter

from inkwell.api.auth import router as auth_router
from inkwell.api.health import router as health_router
from inkwell.api.posts import router as posts_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(posts_router, tags=["posts", "comments"])
