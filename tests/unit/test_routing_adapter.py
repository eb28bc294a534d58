"""Tests for the OSRM routing adapter."""

import httpx
import pytest

from backend.app.adapters.routing import fetch_driving_route
from backend.app.models.common import Coordinates

START = Coordinates(lat=40.1125, lng=-88.2267)
END = Coordinates(lat=40.1149, lng=-88.228)


@pytest.mark.asyncio
async def test_fetch_route_parses_geojson_geometry() -> None:
    """Test that [lng, lat] pairs become ordered Coordinates."""
    seen: list[httpx.Request] = []
    mock_response = {
        "routes": [
            {
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[-88.2267, 40.1125], [-88.2270, 40.1135], [-88.228, 40.1149]],
                }
            }
        ]
    }

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=mock_response)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    route = await fetch_driving_route(START, END, base_url="http://osrm.test/route", client=client)

    assert route == [
        Coordinates(lat=40.1125, lng=-88.2267),
        Coordinates(lat=40.1135, lng=-88.2270),
        Coordinates(lat=40.1149, lng=-88.228),
    ]
    assert seen[0].url.path == "/route/-88.2267,40.1125;-88.228,40.1149"
    assert seen[0].url.params["geometries"] == "geojson"
    assert seen[0].url.params["overview"] == "full"

    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_route_returns_empty_on_http_error() -> None:
    """Test that a non-success status yields an empty route."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(503)))

    assert await fetch_driving_route(START, END, client=client) == []

    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_route_returns_empty_on_network_error() -> None:
    """Test that transport errors are swallowed."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    assert await fetch_driving_route(START, END, client=client) == []

    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_route_returns_empty_without_routes() -> None:
    """Test that a response with no routes yields an empty route."""
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"code": "NoRoute"}))
    )

    assert await fetch_driving_route(START, END, client=client) == []

    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_route_missing_endpoint_makes_no_request() -> None:
    """Test that a missing endpoint short-circuits."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    assert await fetch_driving_route(None, END, client=client) == []
    assert calls == []

    await client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        ["unexpected"],
        "unexpected",
        {"routes": ["not an object"]},
        {"routes": {"geometry": {}}},
        {"routes": [{"geometry": "LINESTRING"}]},
    ],
)
async def test_fetch_route_returns_empty_on_unexpected_body(body: object) -> None:
    """Test that well-formed JSON of the wrong shape yields an empty route."""
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json=body))
    )

    assert await fetch_driving_route(START, END, client=client) == []

    await client.aclose()
