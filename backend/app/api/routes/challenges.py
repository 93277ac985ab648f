import asyncio
import logging

from fastapi import APIRouter, Depends, Path, Query, WebSocket, WebSocketDisconnect, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis

from ...core.auth import get_current_user, validate_access_token
from ...core.security import TokenError
from ...dependencies import get_mongo_db, get_redis
from ...schemas import ChallengeProgress, UserChallengeOut, UserPublic
from ...services.challenges import list_challenges_with_progress, start_challenge
from ...services.notifications import subscribe_challenge_updates

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[ChallengeProgress])
async def get_challenges(
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> list[ChallengeProgress]:
    """활성 챌린지 목록과 내 진행률/메달 등급"""
    challenges = await list_challenges_with_progress(db, current_user.id)
    return [ChallengeProgress(**c) for c in challenges]


@router.post("/{challenge_id}/start", response_model=UserChallengeOut, status_code=status.HTTP_201_CREATED)
async def start(
    challenge_id: str = Path(..., description="챌린지 ID"),
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> UserChallengeOut:
    enrollment = await start_challenge(db, current_user.id, challenge_id)
    return UserChallengeOut(**enrollment)


async def _forward_updates(websocket: WebSocket, redis: Redis, user_id: str) -> None:
    updates = subscribe_challenge_updates(redis, user_id)
    try:
        async for event in updates:
            await websocket.send_json(event)
    finally:
        await updates.aclose()


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    # 클라이언트 메시지는 사용하지 않고 연결 종료만 감지
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/ws")
async def challenge_updates(
    websocket: WebSocket,
    token: str = Query(..., description="access 토큰"),
    redis: Redis = Depends(get_redis),
) -> None:
    """진행도 변경 알림 스트림. 연결이 끊기면 Redis 구독도 바로 해제"""
    try:
        payload = await validate_access_token(redis, token)
    except TokenError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    user_id = payload["sub"]
    forwarder = asyncio.create_task(_forward_updates(websocket, redis, user_id))
    watcher = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        await asyncio.wait({forwarder, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        forwarder.cancel()
        watcher.cancel()
        results = await asyncio.gather(forwarder, watcher, return_exceptions=True)

    for result in results:
        if isinstance(result, Exception) and not isinstance(result, WebSocketDisconnect):
            logger.error("진행도 알림 전송 실패 user=%s: %s", user_id, result)
    logger.info("진행도 알림 구독 종료 user=%s", user_id)
