"""Models package - re-exports for convenience."""

from backend.app.models.common import CamelModel, Coordinates, ScheduleStatus
from backend.app.models.history import BuildingUsageRecord, HistoryCreate, HistoryRecord
from backend.app.models.schedule import (
    ModelResult,
    ModelTarget,
    PathOption,
    RouteSegment,
    ScheduleItem,
    ScheduleOptionsResponse,
    ScheduleRequest,
)

__all__ = [
    # Common
    "CamelModel",
    "Coordinates",
    "ScheduleStatus",
    # Schedule
    "ScheduleItem",
    "PathOption",
    "ModelTarget",
    "ModelResult",
    "RouteSegment",
    "ScheduleRequest",
    "ScheduleOptionsResponse",
    # History
    "HistoryCreate",
    "HistoryRecord",
    "BuildingUsageRecord",
]
