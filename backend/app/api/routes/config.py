from fastapi import APIRouter

from ...core.config import settings

router = APIRouter()


@router.get("/maps", summary="프런트 지도 위젯 설정")
async def maps_config() -> dict[str, str | float]:
    return {
        "tileUrl": settings.map_tile_url,
        "centerLat": settings.weather_latitude,
        "centerLng": settings.weather_longitude,
    }
