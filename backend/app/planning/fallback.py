"""Deterministic fallback itinerary: study at Grainger, then sleep at ECEB."""

from backend.app.models.common import Coordinates
from backend.app.models.schedule import PathOption, ScheduleItem

GRAINGER_COORDS = Coordinates(lat=40.1125, lng=-88.2267)
ECEB_COORDS = Coordinates(lat=40.1149, lng=-88.228)

DEFAULT_FALLBACK_TITLE = "Fallback: Grainger Library + ECEB"
FALLBACK_NOTE = "no where to go, sleep at grainger 2F."


def build_fallback_path(title: str | None = None) -> PathOption:
    """Build the canned two-stop plan used whenever generation fails.

    Args:
        title: Optional title; falls back to DEFAULT_FALLBACK_TITLE when empty

    Returns:
        PathOption with fallback=True
    """
    return PathOption(
        title=title or DEFAULT_FALLBACK_TITLE,
        fallback=True,
        schedule=[
            ScheduleItem(
                time="13:00",
                location="Grainger Library 2F",
                activity="Study at Grainger Library from 13:00 to 23:00.",
                coordinates=GRAINGER_COORDS.model_copy(),
                notes=FALLBACK_NOTE,
            ),
            ScheduleItem(
                time="23:00",
                location="ECE Building (ECEB)",
                activity="Sleep at ECEB from 23:00 to 09:00.",
                coordinates=ECEB_COORDS.model_copy(),
                notes=FALLBACK_NOTE,
            ),
        ],
    )


def fallback_path_payload(title: str | None = None) -> dict:
    """Fallback path in the JSON shape models are asked to emit."""
    return build_fallback_path(title).model_dump(mode="json", by_alias=True)
