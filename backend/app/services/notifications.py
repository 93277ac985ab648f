"""챌린지 진행도 변경 알림 (Redis pub/sub)"""
from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "user-challenges:"


def challenge_channel(user_id: str) -> str:
    return f"{CHANNEL_PREFIX}{user_id}"


async def publish_challenge_update(redis: Redis | None, user_id: str, event: dict[str, Any]) -> None:
    if redis is None:
        return
    try:
        await redis.publish(challenge_channel(user_id), json.dumps(event, default=str))
    except Exception as e:
        # 알림 실패는 저장 결과에 영향을 주지 않음
        logger.warning(f"진행도 알림 발행 실패: {e}")


async def subscribe_challenge_updates(redis: Redis, user_id: str) -> AsyncIterator[dict[str, Any]]:
    """사용자 채널의 이벤트를 순서대로 전달"""
    pubsub = redis.pubsub()
    await pubsub.subscribe(challenge_channel(user_id))
    try:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            try:
                yield json.loads(message["data"])
            except (TypeError, json.JSONDecodeError):
                logger.warning("잘못된 알림 메시지 무시: %r", message.get("data"))
    finally:
        await pubsub.unsubscribe(challenge_channel(user_id))
        await pubsub.aclose()
