from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any

import aiohttp
from aiohttp import ClientError, ContentTypeError

from app.core.config import settings
from app.core.errors import InvalidUpstreamResponse, UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class ParsedWaypoint:
    order: int
    lat: float
    lng: float
    elevation: int | None = None

    def as_row(self) -> dict[str, Any]:
        return {"order": self.order, "lat": self.lat, "lng": self.lng, "elevation": self.elevation}


@dataclass
class ParsedDirections:
    distance_km: float | None
    ascent_m: int | None
    waypoints: list[ParsedWaypoint]

    @property
    def start(self) -> ParsedWaypoint:
        return self.waypoints[0]

    @property
    def end(self) -> ParsedWaypoint:
        return self.waypoints[-1]


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class OrsDirectionsClient:
    """Minimal OpenRouteService directions client (GeoJSON endpoint)."""

    def __init__(self, *, api_key: str, base_url: str, profile: str, timeout_seconds: float) -> None:
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout_seconds = timeout_seconds

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.profile}/geojson"

    async def fetch_directions(
        self,
        *,
        start_lat: float,
        start_lng: float,
        end_lat: float,
        end_lng: float,
    ) -> dict[str, Any]:
        if not self.api_key:
            raise UpstreamError("ORS API key is not configured")

        # ORS expects [lon, lat] pairs.
        body = {
            "coordinates": [[start_lng, start_lat], [end_lng, end_lat]],
            "elevation": True,
        }
        headers = {
            "Authorization": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/geo+json",
        }
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.url, json=body, headers=headers) as response:
                    if not 200 <= response.status < 300:
                        text = await response.text()
                        raise UpstreamError(
                            f"ORS responded {response.status} {response.reason or ''}".strip(),
                            status_code=response.status,
                            body=text,
                        )
                    try:
                        data = await response.json(content_type=None)
                    except (ContentTypeError, ValueError):
                        raise InvalidUpstreamResponse("ORS returned a body that is not JSON")
        except asyncio.TimeoutError:
            raise UpstreamError(f"ORS did not answer within {self.timeout_seconds:g}s")
        except ClientError as e:
            raise UpstreamError(f"Could not reach ORS: {e}")

        logger.debug("ORS directions fetched (%s)", self.profile)
        return data


def parse_directions(payload: Any) -> ParsedDirections:
    """Validate an ORS GeoJSON directions payload and extract the first route."""

    features = payload.get("features") if isinstance(payload, dict) else None
    if not isinstance(features, list) or not features or not isinstance(features[0], dict):
        raise InvalidUpstreamResponse("ORS response has no route feature")

    feature = features[0]

    properties = feature.get("properties")
    summary = properties.get("summary") if isinstance(properties, dict) else None
    if not isinstance(summary, dict):
        summary = {}

    distance = summary.get("distance")
    ascent = summary.get("ascent")

    geometry = feature.get("geometry")
    coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if not isinstance(coords, list) or not coords:
        raise InvalidUpstreamResponse("ORS route geometry has no coordinates")

    waypoints: list[ParsedWaypoint] = []
    for index, coord in enumerate(coords):
        if not isinstance(coord, (list, tuple)) or len(coord) < 2 or not (is_number(coord[0]) and is_number(coord[1])):
            raise InvalidUpstreamResponse(f"ORS coordinate #{index} is malformed")

        elevation = coord[2] if len(coord) > 2 and is_number(coord[2]) else None
        waypoints.append(
            ParsedWaypoint(
                order=index,
                lat=float(coord[1]),
                lng=float(coord[0]),
                elevation=round_half_up(elevation) if elevation is not None else None,
            )
        )

    return ParsedDirections(
        distance_km=distance / 1000 if is_number(distance) else None,
        ascent_m=round_half_up(ascent) if is_number(ascent) else None,
        waypoints=waypoints,
    )


def get_ors_client() -> OrsDirectionsClient:
    return OrsDirectionsClient(
        api_key=settings.ors_api_key,
        base_url=settings.ors_base_url,
        profile=settings.ors_profile,
        timeout_seconds=settings.ors_timeout_seconds,
    )
