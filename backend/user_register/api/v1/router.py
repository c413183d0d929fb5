"""API v1 router aggregator.

All v1 endpoint routers are included here; the app mounts this router at
/api/v1.
"""

from fastapi import APIRouter

from user_register.api.v1 import auth, users

router = APIRouter()

router.include_router(auth.router, tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
