from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ...core.auth import get_current_user
from ...core.config import settings
from ...dependencies import get_mongo_db
from ...schemas import ChallengeCreate, ChallengeOut, UserPublic
from ...services.challenges import upsert_challenge

router = APIRouter()


def check_admin(current_user: UserPublic = Depends(get_current_user)) -> UserPublic:
    """관리자 권한 확인 (ADMIN_EMAIL 미설정 시 거부)"""
    admin_email = settings.admin_email.strip().lower()
    if not admin_email or current_user.email.lower() != admin_email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="관리자 권한이 필요합니다.")
    return current_user


@router.put("/challenges", response_model=ChallengeOut)
async def put_challenge(
    payload: ChallengeCreate,
    current_user: UserPublic = Depends(check_admin),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> ChallengeOut:
    """제목 기준 챌린지 생성 또는 갱신"""
    challenge, _created = await upsert_challenge(db, payload.model_dump(mode="json"))
    return ChallengeOut(**challenge)
