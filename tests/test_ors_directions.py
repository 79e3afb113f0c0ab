import asyncio

import pytest
from aiohttp import web

from app.core.errors import InvalidUpstreamResponse, UpstreamError
from app.parsers.ors_directions import OrsDirectionsClient, parse_directions, round_half_up
from conftest import ors_payload

PATH = "/v2/directions/foot-hiking/geojson"


def _run_against(handler, *, timeout_seconds=5.0, api_key="secret-key"):
    """Serve ``handler`` on a local port and fetch directions from it."""

    seen = {}

    async def recording_handler(request):
        seen["headers"] = dict(request.headers)
        seen["body"] = await request.json()
        return await handler(request)

    async def scenario():
        app = web.Application()
        app.router.add_post(PATH, recording_handler)
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", 0)
        await site.start()
        port = runner.addresses[0][1]
        try:
            client = OrsDirectionsClient(
                api_key=api_key,
                base_url=f"http://127.0.0.1:{port}/v2/directions/",
                profile="foot-hiking",
                timeout_seconds=timeout_seconds,
            )
            return await client.fetch_directions(start_lat=43.05, start_lng=-4.8, end_lat=43.06, end_lng=-4.81)
        finally:
            await runner.cleanup()

    return asyncio.run(scenario()), seen


def test_fetch_directions_success():
    async def handler(request):
        return web.json_response(ors_payload(), content_type="application/geo+json")

    data, seen = _run_against(handler)

    assert data["features"][0]["properties"]["summary"]["distance"] == 12345.0
    assert seen["body"] == {"coordinates": [[-4.8, 43.05], [-4.81, 43.06]], "elevation": True}
    assert seen["headers"]["Authorization"] == "secret-key"


def test_fetch_directions_non_2xx_carries_status_and_body():
    async def handler(request):
        return web.Response(status=403, text='{"error": "Access to this API has been disallowed"}')

    with pytest.raises(UpstreamError) as exc:
        _run_against(handler)

    assert exc.value.status_code == 403
    assert "disallowed" in exc.value.body


def test_fetch_directions_non_json_body():
    async def handler(request):
        return web.Response(status=200, text="<html>maintenance</html>", content_type="text/html")

    with pytest.raises(InvalidUpstreamResponse):
        _run_against(handler)


def test_fetch_directions_timeout():
    async def handler(request):
        await asyncio.sleep(1)
        return web.json_response(ors_payload())

    with pytest.raises(UpstreamError):
        _run_against(handler, timeout_seconds=0.2)


def test_fetch_directions_without_key_fails_fast():
    client = OrsDirectionsClient(api_key="", base_url="http://127.0.0.1:9", profile="foot-hiking", timeout_seconds=1)
    with pytest.raises(UpstreamError):
        asyncio.run(client.fetch_directions(start_lat=1, start_lng=2, end_lat=3, end_lng=4))


def test_client_url():
    client = OrsDirectionsClient(api_key="k", base_url="https://ors.test/v2/directions/", profile="foot-hiking", timeout_seconds=1)
    assert client.url == "https://ors.test/v2/directions/foot-hiking/geojson"


@pytest.mark.parametrize("value, expected", [(2.5, 3), (2.4999, 2), (455.5, 456), (-0.5, 0), (-1.5, -1), (7, 7)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_parse_directions_extracts_route():
    parsed = parse_directions(ors_payload())

    assert parsed.distance_km == pytest.approx(12.345)
    assert parsed.ascent_m == 456
    assert [w.order for w in parsed.waypoints] == [0, 1, 2, 3]
    assert [w.elevation for w in parsed.waypoints] == [1200, 1251, 1311, 1299]
    assert (parsed.start.lat, parsed.start.lng) == (43.05012, -4.80011)
    assert (parsed.end.lat, parsed.end.lng) == (43.0647, -4.81555)


def test_parse_directions_without_summary_or_elevation():
    payload = ors_payload([[-4.8, 43.0], [-4.9, 43.1]], distance=None, ascent=None)

    parsed = parse_directions(payload)

    assert parsed.distance_km is None
    assert parsed.ascent_m is None
    assert [w.elevation for w in parsed.waypoints] == [None, None]


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {},
        {"features": []},
        {"features": ["nope"]},
        {"features": [{"geometry": None}]},
        {"features": [{"geometry": {"coordinates": []}}]},
        ors_payload([[-4.8, 43.0], ["x", 43.1]]),
        ors_payload([[-4.8]]),
    ],
)
def test_parse_directions_rejects_malformed(payload):
    with pytest.raises(InvalidUpstreamResponse):
        parse_directions(payload)
