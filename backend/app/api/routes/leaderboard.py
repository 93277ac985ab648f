from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from ...core.auth import get_current_user
from ...dependencies import get_mongo_db
from ...schemas import Leaderboard, LeaderboardMetric, UserPublic
from ...services.profiles import get_leaderboard

router = APIRouter()


@router.get("/", response_model=Leaderboard)
async def leaderboard(
    metric: LeaderboardMetric = Query(LeaderboardMetric.POINTS),
    limit: int = Query(50, ge=1, le=100),
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> Leaderboard:
    board = await get_leaderboard(db, metric, current_user_id=current_user.id, limit=limit)
    return Leaderboard(**board)
