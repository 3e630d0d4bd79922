"""
HTTP routes for the DevConnector API.
"""

from fastapi import APIRouter

from devconnector.routes import auth, posts, profile, users

router = APIRouter()
router.include_router(users.router)
router.include_router(auth.router)
router.include_router(profile.router)
router.include_router(posts.router)
