from datetime import datetime, timezone

from fastapi import APIRouter

from social_transport.api.auth import router as auth_router
from social_transport.api.destinations import router as destinations_router
from social_transport.api.drivers import router as drivers_router
from social_transport.api.reports import router as reports_router
from social_transport.api.schemas import HealthResponse
from social_transport.api.transports import router as transports_router
from social_transport.api.users import router as users_router


router = APIRouter()

router.include_router(auth_router)
router.include_router(users_router)
router.include_router(drivers_router)
router.include_router(destinations_router)
router.include_router(transports_router)
router.include_router(reports_router)


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc))
