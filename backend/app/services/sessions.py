from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from redis.asyncio import Redis

from ..core.config import settings

SESSION_KEY_PREFIX = "auth:session:"
USER_SESSIONS_PREFIX = "auth:user-sessions:"
REFRESH_KEY_PREFIX = "auth:refresh:"


def _session_key(session_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


def _user_sessions_key(user_id: str) -> str:
    return f"{USER_SESSIONS_PREFIX}{user_id}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def session_ttl() -> int:
    """세션은 refresh 토큰 수명만큼 유지 (최소 1시간)"""
    return max(settings.refresh_token_expire_minutes * 60, settings.access_token_expire_minutes * 60, 3600)


def new_session_id() -> str:
    return uuid4().hex


async def _persist(redis: Redis, session: dict[str, Any]) -> dict[str, Any]:
    ttl = session_ttl()
    user_key = _user_sessions_key(session["user_id"])
    await redis.set(_session_key(session["session_id"]), json.dumps(session), ex=ttl)
    await redis.sadd(user_key, session["session_id"])
    await redis.expire(user_key, ttl)
    return session


async def create_session(
    redis: Redis,
    *,
    session_id: str,
    user_id: str,
    access_jti: str,
    refresh_jti: str,
    ip: str | None = None,
    user_agent: str | None = None,
) -> dict[str, Any]:
    now = _now_iso()
    await remember_refresh_token(redis, refresh_jti, user_id)
    return await _persist(
        redis,
        {
            "session_id": session_id,
            "user_id": user_id,
            "status": "active",
            "created_at": now,
            "updated_at": now,
            "last_seen": now,
            "access_jti": access_jti,
            "refresh_jti": refresh_jti,
            "ip": ip,
            "user_agent": user_agent,
        },
    )


async def get_session(redis: Redis, session_id: str) -> dict[str, Any] | None:
    raw = await redis.get(_session_key(session_id))
    if raw is None:
        return None
    try:
        session = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return session if isinstance(session, dict) else None


async def update_session(redis: Redis, session_id: str, **fields: Any) -> dict[str, Any] | None:
    session = await get_session(redis, session_id)
    if session is None:
        return None
    session.update(fields)
    session["updated_at"] = _now_iso()
    return await _persist(redis, session)


async def touch_session(
    redis: Redis,
    session_id: str,
    *,
    ip: str | None = None,
    user_agent: str | None = None,
) -> dict[str, Any] | None:
    updates: dict[str, Any] = {"last_seen": _now_iso()}
    if ip is not None:
        updates["ip"] = ip
    if user_agent is not None:
        updates["user_agent"] = user_agent
    return await update_session(redis, session_id, **updates)


async def rotate_tokens(redis: Redis, session_id: str, user_id: str, access_jti: str, refresh_jti: str) -> None:
    """refresh 시 새 jti로 교체. 이전 refresh 토큰은 재사용 불가"""
    await remember_refresh_token(redis, refresh_jti, user_id)
    await update_session(redis, session_id, access_jti=access_jti, refresh_jti=refresh_jti)


async def revoke_session(redis: Redis, session_id: str, *, reason: str | None = None) -> dict[str, Any] | None:
    session = await get_session(redis, session_id)
    if session is None:
        return None
    if session.get("refresh_jti"):
        await redis.delete(f"{REFRESH_KEY_PREFIX}{session['refresh_jti']}")
    session["status"] = "revoked"
    session["revoked_at"] = _now_iso()
    if reason:
        session["revoked_reason"] = reason
    return await _persist(redis, session)


async def list_sessions(redis: Redis, user_id: str) -> list[dict[str, Any]]:
    key = _user_sessions_key(user_id)
    sessions: list[dict[str, Any]] = []
    for session_id in await redis.smembers(key):
        session = await get_session(redis, session_id)
        if session is None:
            await redis.srem(key, session_id)
            continue
        sessions.append(session)
    return sorted(sessions, key=lambda s: s.get("last_seen", ""), reverse=True)


async def remember_refresh_token(redis: Redis, jti: str, user_id: str) -> None:
    await redis.set(f"{REFRESH_KEY_PREFIX}{jti}", user_id, ex=settings.refresh_token_expire_minutes * 60)


async def consume_refresh_token(redis: Redis, jti: str | None) -> bool:
    """refresh 토큰 jti가 유효하면 삭제 후 True"""
    if not jti:
        return False
    key = f"{REFRESH_KEY_PREFIX}{jti}"
    if not await redis.exists(key):
        return False
    await redis.delete(key)
    return True
