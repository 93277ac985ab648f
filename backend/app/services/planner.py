from __future__ import annotations

import httpx

from ..schemas.trips import TransportMode
from .geocoding import geocode_location
from .rewards import calculate_reward, emissions_by_mode
from .routing import get_route


async def estimate_route(
    from_location: str,
    to_location: str,
    mode: TransportMode,
    client: httpx.AsyncClient | None = None,
) -> dict:
    """
    출발지/도착지 이름으로 경로와 예상 보상을 계산합니다.

    두 장소를 순서대로 좌표로 변환한 뒤 길찾기를 호출하므로,
    장소 변환이 실패하면 길찾기 API는 호출되지 않습니다.
    """
    origin = await geocode_location(from_location, client)
    destination = await geocode_location(to_location, client)
    route = await get_route(origin, destination, mode, client)

    return {
        "from_location": from_location,
        "to_location": to_location,
        "from_coords": {"lat": origin["lat"], "lng": origin["lng"]},
        "to_coords": {"lat": destination["lat"], "lng": destination["lng"]},
        "transport_mode": mode,
        "distance": route["distance"],
        "duration": route["duration"],
        "geometry": route["geometry"],
        "co2_emissions": emissions_by_mode(route["distance"]),
        "reward": calculate_reward(route["distance"], mode),
    }
