"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, protected_namespaces=()
    )


class Coordinates(BaseModel):
    """Geographic coordinates (WGS84) as the frontend map expects them."""

    lat: float
    lng: float


class ScheduleStatus(str, Enum):
    """Outcome tag for one model's schedule generation."""

    GOOD_RESULT = "GOOD_RESULT"
    LACK_INFO = "LACK_INFO"
    FAILED = "FAILED"
