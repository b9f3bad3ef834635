"""
GET /
Liveness check reporting the service name and version.
"""
from fastapi import APIRouter

from diffshield.core.constants import SERVICE_NAME, SERVICE_VERSION

router = APIRouter(tags=["Health"])


@router.get("/")
async def health_check():
    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}
