from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis

from ..dependencies import get_mongo_db, get_redis
from ..schemas.user import UserPublic
from ..services import sessions as session_service
from ..services.users import document_to_user, get_user_by_id
from .security import TokenError, decode_token

http_bearer = HTTPBearer(auto_error=False)


async def validate_access_token(redis: Redis, token: str) -> dict:
    """access 토큰과 Redis 세션 상태를 함께 검증"""
    payload = decode_token(token, expected_type="access")
    session = await session_service.get_session(redis, payload["session_id"])
    if session is None or session.get("status") != "active":
        raise TokenError(detail="세션이 만료되었거나 로그아웃되었습니다.")
    if session.get("access_jti") != payload.get("jti"):
        raise TokenError(detail="만료된 토큰입니다.")
    return payload


async def get_current_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    redis: Redis = Depends(get_redis),
) -> dict:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="인증 정보가 필요합니다.")

    payload = await validate_access_token(redis, credentials.credentials)
    client_ip = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    await session_service.touch_session(redis, payload["session_id"], ip=client_ip, user_agent=user_agent)
    return payload


async def get_current_user(
    payload: dict = Depends(get_current_token),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> UserPublic:
    doc = await get_user_by_id(db, payload["sub"])
    if not doc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="사용자를 찾을 수 없습니다.")

    return document_to_user(doc)
