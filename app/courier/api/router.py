from fastapi import APIRouter

from courier.api.routes.notifications import router as notifications_router
from courier.api.routes.system import router as system_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(notifications_router, prefix="/api/v1")
