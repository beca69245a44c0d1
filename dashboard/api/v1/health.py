from fastapi import APIRouter
from dashboard.config import settings

router = APIRouter()

@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "newrelic_configured": bool(settings.newrelic_api_key),
    }
