from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from ...core.auth import get_current_user
from ...dependencies import get_mongo_db
from ...schemas import ProfileOut, UserPublic
from ...services.profiles import get_profile

router = APIRouter()


@router.get("/me", response_model=ProfileOut)
async def my_profile(
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> ProfileOut:
    """대시보드용 누적 포인트, CO2 절감량, 이동 거리"""
    return ProfileOut(**await get_profile(db, current_user.id))
