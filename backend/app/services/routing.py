"""OpenRouteService 길찾기 API 클라이언트"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.config import settings
from ..core.exceptions import ExternalServiceError, MissingCredentials, NoRouteFound
from ..schemas.trips import TransportMode

logger = logging.getLogger(__name__)

# 걷기와 조깅은 같은 프로필 사용
ORS_PROFILES: dict[TransportMode, str] = {
    TransportMode.WALKING: "foot-walking",
    TransportMode.JOGGING: "foot-walking",
    TransportMode.CYCLING: "cycling-regular",
    TransportMode.DRIVING: "driving-car",
}


async def get_route(
    origin: dict[str, float],
    destination: dict[str, float],
    mode: TransportMode,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """
    두 좌표 사이의 단일 경로 조회

    Returns:
        {"distance": km, "duration": 분, "geometry": 인코딩된 폴리라인}
    """
    if not settings.ors_api_key:
        raise MissingCredentials("OpenRouteService")

    if client is None:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as owned_client:
            return await get_route(origin, destination, mode, owned_client)

    profile = ORS_PROFILES[mode]
    try:
        response = await client.post(
            f"{settings.ors_base_url}/v2/directions/{profile}",
            json={"coordinates": [[origin["lng"], origin["lat"]], [destination["lng"], destination["lat"]]]},
            headers={"Authorization": settings.ors_api_key, "Content-Type": "application/json"},
        )
    except httpx.HTTPError as exc:
        logger.error("OpenRouteService 호출 실패: %s", exc)
        raise ExternalServiceError("OpenRouteService", str(exc)) from exc

    # ORS는 경로가 없을 때 404와 에러 본문으로 응답
    if response.status_code >= 400 and response.status_code != 404:
        logger.error("OpenRouteService 오류: %s", response.status_code)
        raise ExternalServiceError("OpenRouteService", f"HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        logger.error("OpenRouteService 응답 파싱 실패: %s", exc)
        raise ExternalServiceError("OpenRouteService", "invalid JSON response") from exc
    if not isinstance(data, dict):
        data = {}
    routes = data.get("routes") or []
    if not routes:
        logger.info("경로 없음 (%s): %s", profile, data.get("error"))
        raise NoRouteFound()

    route = routes[0]
    summary = route.get("summary", {})
    return {
        "distance": summary.get("distance", 0) / 1000,
        "duration": summary.get("duration", 0) / 60,
        "geometry": route.get("geometry"),
    }
