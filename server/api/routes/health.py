"""Health check routes"""
from fastapi import APIRouter, Depends

from api.schemas.response_schemas import ServicesHealthResponse
from core.dependencies import get_services
from core.services import BotServices
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "ok", "service": "venue-faq-bot"}


@router.get("/health/services", response_model=ServicesHealthResponse)
async def services_health(services: BotServices = Depends(get_services)):
    """Report which classifier and knowledge-base bindings are configured"""
    status = services.status()
    all_bound = all(status["luis"].values()) and all(status["qna"].values())
    if not all_bound:
        logger.warning(f"Service bindings incomplete: {status}")
    return ServicesHealthResponse(
        status="ok" if all_bound else "degraded",
        luis=status["luis"],
        qna=status["qna"],
    )
