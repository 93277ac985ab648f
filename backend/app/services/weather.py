"""날씨 정보 조회 서비스 (Open-Meteo API)"""
from __future__ import annotations

import json
import logging
import math
from typing import Any

import httpx
from redis.asyncio import Redis

from ..core.config import settings

logger = logging.getLogger(__name__)

WEATHER_CACHE_TTL = 1800  # 30분 캐시

# WMO 날씨 코드
WEATHER_DESCRIPTIONS = {
    0: "Clear",
    1: "Partly Cloudy",
    2: "Cloudy",
    3: "Overcast",
    45: "Foggy",
    51: "Light Drizzle",
    61: "Rain",
    71: "Snow",
    80: "Rain Showers",
    95: "Thunderstorm",
}


def _classify_icon(weather_code: int) -> str:
    if weather_code < 3:
        return "clear"
    if weather_code < 45:
        return "clouds"
    return "rain"


def _parse_weather_response(data: dict) -> dict[str, Any]:
    current = data.get("current", {})
    weather_code = int(current.get("weather_code", 0))
    return {
        "available": True,
        "temperature": int(math.floor(current.get("temperature_2m", 0.0) + 0.5)),  # 0.5는 올림
        "description": WEATHER_DESCRIPTIONS.get(weather_code, "Unknown"),
        "humidity": current.get("relative_humidity_2m"),
        "wind_speed": current.get("wind_speed_10m"),
        "weather_code": weather_code,
        "icon": _classify_icon(weather_code),
    }


def _get_default_weather() -> dict[str, Any]:
    """API 실패 시 반환값"""
    return {
        "available": False,
        "temperature": None,
        "description": "Unable to load weather data",
        "humidity": None,
        "wind_speed": None,
        "weather_code": None,
        "icon": "clouds",
    }


async def get_weather_info(
    lat: float | None = None,
    lon: float | None = None,
    redis_client: Redis | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """
    현재 날씨 조회. 좌표를 생략하면 설정된 기본 위치(뮌스터 중앙역) 사용

    Returns:
        {
            "available": True,
            "temperature": 12,
            "description": "Partly Cloudy",
            "humidity": 81,
            "wind_speed": 14.2,
            "weather_code": 1,
            "icon": "clear"
        }
    """
    lat = settings.weather_latitude if lat is None else lat
    lon = settings.weather_longitude if lon is None else lon

    cache_key = f"weather:{lat:.2f}:{lon:.2f}"
    if redis_client:
        try:
            cached = await redis_client.get(cache_key)
            if cached:
                return json.loads(cached)
        except Exception as e:
            logger.warning(f"Redis 캐시 조회 실패: {e}")

    if client is None:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as owned_client:
            return await get_weather_info(lat, lon, redis_client, owned_client)

    try:
        response = await client.get(
            settings.open_meteo_url,
            params={
                "latitude": lat,
                "longitude": lon,
                "current": "temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m",
                "timezone": settings.weather_timezone,
            },
        )
        response.raise_for_status()
        weather_info = _parse_weather_response(response.json())
    except httpx.HTTPError as e:
        logger.error(f"날씨 API 호출 실패: {e}")
        return _get_default_weather()

    if redis_client:
        try:
            await redis_client.setex(cache_key, WEATHER_CACHE_TTL, json.dumps(weather_info))
        except Exception as e:
            logger.warning(f"Redis 캐싱 실패: {e}")

    return weather_info
