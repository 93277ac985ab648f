"""
날씨 위젯: Open-Meteo 응답 파싱, 캐시, 실패 시 기본값
"""
import json

import pytest

from backend.app.services.weather import get_weather_info


@pytest.mark.asyncio
async def test_current_weather_is_parsed(external_apis):
    async with external_apis.client() as client:
        weather = await get_weather_info(client=client)

    assert weather == {
        "available": True,
        "temperature": 12,
        "description": "Rain",
        "humidity": 81,
        "wind_speed": 14.2,
        "weather_code": 61,
        "icon": "rain",
    }
    request = external_apis.requests[0]
    assert request.url.params["latitude"] == "51.9625"
    assert request.url.params["timezone"] == "Europe/Berlin"


@pytest.mark.asyncio
async def test_unknown_code_and_clear_icon(external_apis):
    external_apis.weather_current = {"temperature_2m": 20.2, "relative_humidity_2m": 40, "weather_code": 1, "wind_speed_10m": 3}
    async with external_apis.client() as client:
        weather = await get_weather_info(client=client)
    assert weather["description"] == "Partly Cloudy"
    assert weather["icon"] == "clear"

    external_apis.weather_current["weather_code"] = 3
    async with external_apis.client() as client:
        weather = await get_weather_info(lat=52.0, lon=7.6, client=client)
    assert weather["icon"] == "clouds"


@pytest.mark.asyncio
async def test_weather_is_cached_in_redis(external_apis, fake_redis):
    async with external_apis.client() as client:
        first = await get_weather_info(redis_client=fake_redis, client=client)
        second = await get_weather_info(redis_client=fake_redis, client=client)

    assert first == second
    assert len(external_apis.requests) == 1
    assert json.loads(fake_redis.store["weather:51.96:7.63"]) == first


@pytest.mark.asyncio
async def test_upstream_failure_returns_default(external_apis):
    external_apis.weather_status = 500
    async with external_apis.client() as client:
        weather = await get_weather_info(client=client)

    assert weather["available"] is False
    assert weather["temperature"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize(("raw", "shown"), [(12.5, 13), (0.5, 1), (-0.4, 0), (11.49, 11)])
async def test_temperature_rounds_half_up(external_apis, raw, shown):
    external_apis.weather_current["temperature_2m"] = raw
    async with external_apis.client() as client:
        weather = await get_weather_info(client=client)

    assert weather["temperature"] == shown
