"""Road routing adapter using the OSRM demo server (keyless)."""

import logging
from collections.abc import Awaitable, Callable

import httpx

from backend.app.models.common import Coordinates

logger = logging.getLogger(__name__)

DEFAULT_OSRM_URL = "http://router.project-osrm.org/route/v1/driving"

RoutePlanner = Callable[[Coordinates, Coordinates], Awaitable[list[Coordinates]]]


async def fetch_driving_route(
    start: Coordinates | None,
    end: Coordinates | None,
    base_url: str = DEFAULT_OSRM_URL,
    client: httpx.AsyncClient | None = None,
    timeout: float = 4.0,
) -> list[Coordinates]:
    """Fetch a road-following polyline between two points.

    Args:
        start: Start coordinates
        end: End coordinates
        base_url: OSRM driving route endpoint
        client: Optional httpx client (for testing with mocks)
        timeout: Request timeout in seconds when no client is given

    Returns:
        Ordered waypoints along the road, or [] when routing is unavailable
    """
    if start is None or end is None:
        return []

    # Docs: http://project-osrm.org/docs/v5.24.0/api/#route-service
    url = f"{base_url}/{start.lng},{start.lat};{end.lng},{end.lat}"
    params = {"overview": "full", "geometries": "geojson", "steps": "false"}

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=timeout)
        close_client = True

    try:
        response = await client.get(url, params=params)
        if response.is_error:
            logger.warning(f"OSRM request failed with status {response.status_code}")
            return []
        data = response.json()

        # Response structure: {routes: [{geometry: {coordinates: [[lng, lat], ...]}}]}
        if not isinstance(data, dict):
            logger.warning("OSRM returned a non-object body")
            return []
        routes = data.get("routes") or []
        first = routes[0] if isinstance(routes, list) and routes else None
        geometry = first.get("geometry") if isinstance(first, dict) else None
        if not isinstance(geometry, dict):
            return []

        return [Coordinates(lat=lat, lng=lng) for lng, lat in geometry["coordinates"]]
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
        logger.warning(f"OSRM error: {e}")
        return []
    finally:
        if close_client:
            await client.aclose()


def make_route_planner(
    base_url: str = DEFAULT_OSRM_URL, timeout: float = 4.0
) -> RoutePlanner:
    """Bind routing configuration into a two-argument planner callable."""

    async def plan(start: Coordinates, end: Coordinates) -> list[Coordinates]:
        return await fetch_driving_route(start, end, base_url=base_url, timeout=timeout)

    return plan
