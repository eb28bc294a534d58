"""History models - saved searches and building usage stats."""

from datetime import datetime
from typing import Any

from pydantic import Field

from backend.app.models.common import CamelModel


class HistoryCreate(CamelModel):
    """Payload for saving a search together with its path options."""

    title: str | None = None
    subtitle: str | None = None
    user_request: str | None = None
    requested_date: str | None = None
    metadata: dict[str, Any] | None = None
    path_options: Any = Field(default_factory=list)


class HistoryRecord(CamelModel):
    """A saved history as returned to the client."""

    id: int
    user: int
    title: str
    subtitle: str
    user_request: str
    requested_date: str | None
    metadata: dict[str, Any]
    path_options: list[Any]
    created_at: datetime


class BuildingUsageRecord(CamelModel):
    """How many times a user saved a stop at a building."""

    key: str
    building: str
    count: int
    created_at: datetime
    updated_at: datetime
