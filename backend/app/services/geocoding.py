"""장소명을 좌표로 변환하는 지오코딩 서비스 (고정 좌표표 → Nominatim)"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.config import settings
from ..core.exceptions import ExternalServiceError, LocationNotFound

logger = logging.getLogger(__name__)

# 자주 쓰는 랜드마크는 외부 호출 없이 바로 좌표 반환
FALLBACK_COORDS: dict[str, dict[str, float]] = {
    "Hauptbahnhof": {"lat": 51.9625, "lng": 7.6251},
    "Prinzipalmarkt": {"lat": 51.9609, "lng": 7.626},
    "Schloss Münster": {"lat": 51.9618, "lng": 7.6178},
}

# 자동완성용 뮌스터 장소 목록
MUENSTER_LOCATIONS = [
    "Hauptbahnhof", "Prinzipalmarkt", "Schloss Münster", "Aasee", "Erbdrostenhof",
    "LWL-Museum für Kunst und Kultur", "Allwetterzoo Münster", "St. Paulus Dom",
    "Mauritzviertel", "Hafenviertel", "Stadthaus Münster", "Rathaus Münster",
    "Botanischer Garten", "Kiepenkerl", "Clemenskirche", "Kardinal-von-Galen-Ring",
    "Königsstraße", "Buddenturm", "Aegidiikirche", "Kunsthalle Münster", "Theater Münster",
    "Zooallee", "Hansaring", "Dreieinigkeitskirche", "Schlossplatz", "Kardinal-von-Galen-Platz",
    "Berliner Platz", "Hüfferstraße", "Coermühle", "Aaseeterrassen", "Ringstraße",
    "Sentruper Höhe", "Roxel", "Gievenbeck", "Kinderhaus", "Mecklenbeck",
    "Hiltrup", "Handorf", "Albachten", "Angelmodde", "Mauritzstraße",
    "Erbdrostenstraße", "Kardinal-von-Galen-Weg", "Klinikum Münster", "Lindenstraße",
    "Neubrückenstraße", "Rochusplatz", "Piusallee", "Alter Steinweg", "Domplatz",
]


def suggest_locations(query: str) -> list[str]:
    """대소문자 무시 부분 문자열 일치로 자동완성 후보 반환"""
    needle = query.strip().lower()
    if not needle:
        return []
    return [name for name in MUENSTER_LOCATIONS if needle in name.lower()]


def lookup_fallback(location: str) -> dict[str, Any] | None:
    """입력에 랜드마크 이름이 포함되어 있으면 고정 좌표 반환"""
    needle = location.strip().lower()
    for name, coords in FALLBACK_COORDS.items():
        if name.lower() in needle:
            return {"lat": coords["lat"], "lng": coords["lng"], "name": name, "source": "fallback"}
    return None


def _build_query(location: str) -> str:
    lowered = location.lower()
    if "muenster" in lowered or "münster" in lowered:
        return location
    return f"{location}, {settings.geocoding_city}"


async def geocode_location(location: str, client: httpx.AsyncClient | None = None) -> dict[str, Any]:
    """
    장소명을 좌표로 변환

    Args:
        location: 사용자가 입력한 장소명 (예: "Hauptbahnhof", "Aasee")
        client: 재사용할 httpx 클라이언트 (없으면 새로 생성)

    Returns:
        {"lat": 51.96..., "lng": 7.62..., "name": "...", "source": "fallback" | "nominatim"}

    Raises:
        LocationNotFound: 고정 좌표표와 Nominatim 모두 결과가 없을 때
        ExternalServiceError: Nominatim 응답 오류 또는 네트워크 실패
    """
    fallback = lookup_fallback(location)
    if fallback:
        return fallback

    if client is None:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as owned_client:
            return await geocode_location(location, owned_client)

    try:
        response = await client.get(
            f"{settings.nominatim_base_url}/search",
            params={"q": _build_query(location), "format": "json", "limit": 1},
            headers={"User-Agent": settings.nominatim_user_agent},
        )
    except httpx.HTTPError as exc:
        logger.error("Nominatim 호출 실패: %s", exc)
        raise ExternalServiceError("Nominatim", str(exc)) from exc

    if response.status_code != 200:
        logger.warning("Nominatim 오류: %s", response.status_code)
        raise ExternalServiceError("Nominatim", f"HTTP {response.status_code}")

    results = response.json()
    if not results:
        logger.info("장소 '%s' 검색 결과 없음", location)
        raise LocationNotFound(location)

    best = results[0]
    return {
        "lat": float(best["lat"]),
        "lng": float(best["lon"]),
        "name": best.get("display_name", location),
        "source": "nominatim",
    }
