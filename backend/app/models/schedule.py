"""Schedule models - itineraries produced by the generation pipeline."""

from typing import Any

from pydantic import Field

from backend.app.models.common import CamelModel, Coordinates, ScheduleStatus


class ScheduleItem(CamelModel):
    """One stop in an itinerary.

    `time` is an HH:MM label in local campus time and is not validated.
    """

    time: str
    location: str
    activity: str
    coordinates: Coordinates | None = None
    notes: str | None = None


class PathOption(CamelModel):
    """One candidate itinerary. Schedule order is the visiting order."""

    title: str
    schedule: list[ScheduleItem]
    fallback: bool = False


class ModelTarget(CamelModel):
    """A backend chat model the orchestrator fans out to."""

    id: int
    model_id: str
    model_name: str


class RouteSegment(CamelModel):
    """Road-following polyline between two consecutive stops."""

    from_index: int
    to_index: int
    route: list[Coordinates] = Field(default_factory=list)


class ModelResult(CamelModel):
    """Per-model outcome returned to the caller.

    `schedule` holds whatever the model produced (items are not deep
    validated), or the fallback schedule.
    """

    id: int
    model_id: str
    model_name: str
    status: ScheduleStatus
    reason: str
    title: str
    schedule: list[Any]
    segments: list[RouteSegment] = Field(default_factory=list)
    is_fallback: bool


class ScheduleRequest(CamelModel):
    """Inbound schedule generation request."""

    user_request: str = ""
    date: str = ""
    home_address: str | None = None
    sleep_at_library: bool = False
    meal_preference: str | None = None


class ScheduleOptionsResponse(CamelModel):
    """Response body for POST /api/llm-schedules."""

    success: bool = True
    options: list[ModelResult]
