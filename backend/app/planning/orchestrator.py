"""Fan-out orchestrator: one request, several models, one result per model.

Each configured model runs the full pipeline (invoke -> interpret) in
isolation and concurrently. Failures are contained to the model's own
slot, and results keep the configured model order.
"""

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Any

from backend.app.adapters.routing import RoutePlanner
from backend.app.llm.client import DEFAULT_MAX_TOKENS, ChatCompletionClient
from backend.app.llm.interpreter import InterpretedResponse, interpret_response
from backend.app.llm.prompts import PromptContext, build_schedule_prompt
from backend.app.models.common import Coordinates, ScheduleStatus
from backend.app.models.schedule import ModelResult, ModelTarget, RouteSegment, ScheduleRequest
from backend.app.planning.fallback import fallback_path_payload
from backend.app.utils.logging import StructuredModelLogger
from backend.app.utils.metrics import ModelMetrics

logger = logging.getLogger(__name__)

DEFAULT_MODELS: tuple[ModelTarget, ...] = (
    ModelTarget(
        id=1,
        model_id="accounts/fireworks/models/qwen2p5-vl-32b-instruct",
        model_name="Qwen2.5 VL 32B Instruct",
    ),
    ModelTarget(
        id=2,
        model_id="accounts/fireworks/models/llama-v3p3-70b-instruct",
        model_name="Llama v3.3 70B Instruct",
    ),
)

FAILED_REASON = "Failed to generate schedule; using fallback at Grainger Library."


def option_fallback_title(target: ModelTarget) -> str:
    """Fallback title annotated with the model's ordinal."""
    return f"Option {target.id}: Grainger Library 2F"


async def run_model_pipeline(
    client: ChatCompletionClient,
    model_id: str,
    prompt: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> InterpretedResponse:
    """Invoke one model once and interpret its answer.

    Raises:
        LLMConfigurationError: If the provider is not configured
        Exception: Transport errors from the client propagate unchanged
    """
    raw = await client.complete(model_id=model_id, prompt=prompt, max_tokens=max_tokens)
    return interpret_response(raw)


def _effective_path(target: ModelTarget, path_result: list[Any]) -> dict[str, Any]:
    first = path_result[0] if path_result else None
    if isinstance(first, dict):
        schedule = first.get("schedule")
        if isinstance(schedule, list) and schedule:
            return first
    return fallback_path_payload(option_fallback_title(target))


def _result_from_interpretation(
    target: ModelTarget, interpreted: InterpretedResponse
) -> ModelResult:
    path = _effective_path(target, interpreted.path_result)
    title = path.get("title")

    return ModelResult(
        id=target.id,
        model_id=target.model_id,
        model_name=target.model_name,
        status=interpreted.status,
        reason=interpreted.reason or "",
        title=title if isinstance(title, str) and title else f"Option {target.id}",
        schedule=path["schedule"],
        is_fallback=bool(path.get("fallback")),
    )


def _failed_result(target: ModelTarget, reason: str) -> ModelResult:
    path = fallback_path_payload(option_fallback_title(target))
    return ModelResult(
        id=target.id,
        model_id=target.model_id,
        model_name=target.model_name,
        status=ScheduleStatus.FAILED,
        reason=reason,
        title=path["title"],
        schedule=path["schedule"],
        is_fallback=True,
    )


def _coordinates_of(item: Any) -> Coordinates | None:
    if not isinstance(item, dict):
        return None
    coords = item.get("coordinates")
    if not isinstance(coords, dict):
        return None
    lat, lng = coords.get("lat"), coords.get("lng")
    # bool is an int subclass
    if not all(isinstance(v, int | float) and not isinstance(v, bool) for v in (lat, lng)):
        return None
    return Coordinates(lat=lat, lng=lng)


async def build_route_segments(
    schedule: list[Any], route_planner: RoutePlanner
) -> list[RouteSegment]:
    """Route every consecutive pair of stops.

    Legs with a stop lacking usable coordinates, or whose routing fails,
    get an empty route.
    """
    segments: list[RouteSegment] = []
    for i in range(len(schedule) - 1):
        start = _coordinates_of(schedule[i])
        end = _coordinates_of(schedule[i + 1])
        route: list[Coordinates] = []
        if start and end:
            try:
                route = await route_planner(start, end)
            except Exception as e:
                logger.warning(f"Routing failed for leg {i}->{i + 1}: {e}")
        segments.append(RouteSegment(from_index=i, to_index=i + 1, route=route))
    return segments


async def _generate_for_model(
    target: ModelTarget,
    prompt: str,
    client: ChatCompletionClient,
    *,
    max_tokens: int,
    timeout_seconds: float | None,
    route_planner: RoutePlanner | None,
    metrics: ModelMetrics,
    result_logger: StructuredModelLogger,
) -> ModelResult:
    start_time = time.monotonic()
    error_reason: str | None = None

    try:
        pipeline = run_model_pipeline(client, target.model_id, prompt, max_tokens)
        if timeout_seconds is not None:
            interpreted = await asyncio.wait_for(pipeline, timeout=timeout_seconds)
        else:
            interpreted = await pipeline
    except TimeoutError as e:
        logger.warning(f"LLM call timed out for model {target.model_id} after {timeout_seconds}s")
        error_reason = "timeout"
        reason = (
            f"Model call timed out after {timeout_seconds}s"
            if timeout_seconds is not None
            else str(e) or FAILED_REASON
        )
        result = _failed_result(target, reason)
    except Exception as e:
        logger.error(f"LLM call failed for model {target.model_id}: {e}")
        error_reason = type(e).__name__
        result = _failed_result(target, str(e) or FAILED_REASON)
    else:
        result = _result_from_interpretation(target, interpreted)

    if route_planner is not None:
        result.segments = await build_route_segments(result.schedule, route_planner)

    elapsed_ms = (time.monotonic() - start_time) * 1000
    metrics.record_result(target.model_id, result.status.value, elapsed_ms, result.is_fallback)
    result_logger.log_result(
        target.model_id,
        result.status.value,
        elapsed_ms,
        result.is_fallback,
        error_reason=error_reason,
    )
    return result


async def generate_schedule_options(
    request: ScheduleRequest,
    *,
    client: ChatCompletionClient,
    models: Sequence[ModelTarget] = DEFAULT_MODELS,
    route_planner: RoutePlanner | None = None,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    timeout_seconds: float | None = None,
    metrics: ModelMetrics | None = None,
    result_logger: StructuredModelLogger | None = None,
) -> list[ModelResult]:
    """Generate one itinerary option per configured model.

    Args:
        request: User request, target date and optional preferences
        client: Chat-completion client shared by all model calls
        models: Ordered registry of backend models
        route_planner: Optional road routing for stop-to-stop segments
        max_tokens: Output token budget per call
        timeout_seconds: Optional per-model timeout; a timed out model is FAILED
        metrics: Metrics recorder (optional, defaults to no-op)
        result_logger: Structured logger (optional)

    Returns:
        One ModelResult per model, in the order of `models`, each with a
        non-empty schedule
    """
    prompt = build_schedule_prompt(PromptContext.from_request(request))
    metrics = metrics or ModelMetrics()
    result_logger = result_logger or StructuredModelLogger()

    logger.info(f"Fanning out schedule generation to {len(models)} model(s)")

    return list(
        await asyncio.gather(
            *(
                _generate_for_model(
                    target,
                    prompt,
                    client,
                    max_tokens=max_tokens,
                    timeout_seconds=timeout_seconds,
                    route_planner=route_planner,
                    metrics=metrics,
                    result_logger=result_logger,
                )
                for target in models
            )
        )
    )
