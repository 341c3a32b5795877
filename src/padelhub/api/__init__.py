"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This rejects anonymous callers on every route of
a router before any handler runs. What an authenticated caller may touch
is then decided inside each handler by AccessAuthority. Health and auth
routers are open.
"""

from fastapi import APIRouter, Depends

from padelhub.api.auth import router as auth_router
from padelhub.api.coach import router as coach_router
from padelhub.api.feedback import router as feedback_router
from padelhub.api.health import router as health_router
from padelhub.api.library import router as library_router
from padelhub.api.nutrition import router as nutrition_router
from padelhub.api.profiles import router as profiles_router
from padelhub.api.training import router as training_router
from padelhub.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid access token
api_router.include_router(profiles_router, tags=["profiles"], dependencies=_auth)
api_router.include_router(
    training_router,
    tags=["goals", "shots", "sessions", "wellbeing", "strength"],
    dependencies=_auth,
)
api_router.include_router(nutrition_router, tags=["nutrition"], dependencies=_auth)
api_router.include_router(library_router, tags=["library"], dependencies=_auth)
api_router.include_router(coach_router, tags=["coach"], dependencies=_auth)
api_router.include_router(feedback_router, tags=["feedback"], dependencies=_auth)
