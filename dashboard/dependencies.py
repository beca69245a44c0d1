from functools import lru_cache
import logging

from dashboard.domain.services.metrics_service import MetricsService

logger = logging.getLogger(__name__)


@lru_cache()
def get_metrics_service() -> MetricsService:
    """Shared service; the underlying httpx client pools connections across requests."""
    logger.info("🔧 Creating New Relic metrics service")
    return MetricsService()
