"""Schedule generation endpoint - POST /api/llm-schedules."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from backend.app.adapters.routing import RoutePlanner, make_route_planner
from backend.app.config import get_settings
from backend.app.llm.client import ChatCompletionClient, get_llm_client
from backend.app.models.schedule import ScheduleOptionsResponse, ScheduleRequest
from backend.app.planning.orchestrator import DEFAULT_MODELS, generate_schedule_options
from backend.app.utils.metrics import PrometheusModelMetrics

router = APIRouter(prefix="/api", tags=["schedules"])
logger = logging.getLogger(__name__)


def get_chat_client() -> ChatCompletionClient:
    """Chat-completion client configured from settings."""
    return get_llm_client()


def get_route_planner() -> RoutePlanner | None:
    """Road routing for segments, or None when disabled."""
    settings = get_settings()
    if not settings.enable_route_segments:
        return None
    return make_route_planner(settings.osrm_base_url, timeout=settings.osrm_timeout_seconds)


@router.post("/llm-schedules", response_model=ScheduleOptionsResponse)
async def create_schedules(
    request: ScheduleRequest,
    client: Annotated[ChatCompletionClient, Depends(get_chat_client)],
    route_planner: Annotated[RoutePlanner | None, Depends(get_route_planner)],
) -> ScheduleOptionsResponse:
    """Generate one itinerary option per configured model.

    Every option carries a renderable schedule; models that fail are
    reported as FAILED with the fallback itinerary.

    Raises:
        HTTPException: 500 if the fan-out itself fails
    """
    settings = get_settings()
    logger.info(f"[POST /api/llm-schedules] date={request.date!r}")

    try:
        options = await generate_schedule_options(
            request,
            client=client,
            models=DEFAULT_MODELS,
            route_planner=route_planner,
            max_tokens=settings.llm_max_tokens,
            timeout_seconds=settings.llm_timeout_seconds,
            metrics=PrometheusModelMetrics(),
        )
    except Exception as e:
        logger.error(f"Error in /api/llm-schedules: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="server_error",
        ) from e

    return ScheduleOptionsResponse(success=True, options=options)
