from fastapi import APIRouter

from .health import router as health_router
from .mail import router as mail_router


# Everything under /api; the browser form calls these same-origin.
api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(mail_router)
