"""Prometheus scrape endpoint for schedule generation."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics() -> Response:
    """Expose per-model outcome metrics from the schedule fan-out.

    Each /api/llm-schedules call records one sample per configured model,
    so latency and fallback rates can be compared across models:
    - llm_call_latency_ms{model, status}
    - llm_results_total{model, status}
    - llm_fallbacks_total{model}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
