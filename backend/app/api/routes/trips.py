import httpx
from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis

from ...core.auth import get_current_user
from ...dependencies import get_http_client, get_mongo_db, get_redis
from ...schemas import (
    LocationSuggestions,
    RouteEstimate,
    RouteEstimateRequest,
    TripCreate,
    TripOut,
    TripSaveResult,
    UserPublic,
)
from ...services.geocoding import suggest_locations
from ...services.planner import estimate_route
from ...services.rewards import calculate_reward
from ...services.trips import list_recent_trips, save_trip

router = APIRouter()


@router.get("/locations", response_model=LocationSuggestions)
async def location_suggestions(q: str = Query("", description="장소명 일부")) -> LocationSuggestions:
    return LocationSuggestions(query=q, suggestions=suggest_locations(q))


@router.post("/estimate", response_model=RouteEstimate)
async def estimate(
    payload: RouteEstimateRequest,
    current_user: UserPublic = Depends(get_current_user),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> RouteEstimate:
    """장소명 두 개로 경로, 소요 시간, 예상 CO2 절감량과 포인트 계산"""
    result = await estimate_route(payload.from_location, payload.to_location, payload.transport_mode, client)
    return RouteEstimate(**result)


@router.post("/", response_model=TripSaveResult, status_code=status.HTTP_201_CREATED)
async def create_trip(
    payload: TripCreate,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    redis: Redis = Depends(get_redis),
) -> TripSaveResult:
    """이동 저장. 보상은 서버에서 거리와 이동 수단으로 다시 계산"""
    reward = calculate_reward(payload.distance, payload.transport_mode)
    result = await save_trip(db, current_user.id, payload, reward, redis=redis)
    return TripSaveResult(**result)


@router.get("/recent", response_model=list[TripOut])
async def recent_trips(
    limit: int = Query(5, ge=1, le=50),
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> list[TripOut]:
    trips = await list_recent_trips(db, current_user.id, limit=limit)
    return [TripOut(**t) for t in trips]
