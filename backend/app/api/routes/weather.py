import httpx
from fastapi import APIRouter, Depends, Query
from redis.asyncio import Redis

from ...dependencies import get_http_client, get_redis
from ...schemas import WeatherOut
from ...services.weather import get_weather_info

router = APIRouter()


@router.get("/", response_model=WeatherOut)
async def current_weather(
    lat: float | None = Query(None, ge=-90, le=90),
    lon: float | None = Query(None, ge=-180, le=180),
    redis: Redis = Depends(get_redis),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> WeatherOut:
    return WeatherOut(**await get_weather_info(lat, lon, redis_client=redis, client=client))
