from __future__ import annotations

from datetime import datetime

from bson import ObjectId
from fastapi import HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..schemas.profiles import LeaderboardMetric

PROFILES_COL = "profiles"

EARTH_CIRCUMFERENCE_KM = 40075
CO2_GOAL_KG = 1000

LEADERBOARD_SORT_FIELDS = {
    LeaderboardMetric.POINTS: "total_points",
    LeaderboardMetric.CO2: "co2_saved",
    LeaderboardMetric.DISTANCE: "total_distance",
}


def _normalize(doc: dict) -> dict:
    doc = {**doc}
    doc["id"] = str(doc.pop("_id"))
    doc.setdefault("total_points", 0)
    doc.setdefault("co2_saved", 0.0)
    doc.setdefault("total_distance", 0.0)
    return doc


async def create_profile(db: AsyncIOMotorDatabase, user_id: ObjectId, username: str, full_name: str = "") -> dict:
    now = datetime.utcnow()
    doc = {
        "_id": user_id,
        "username": username,
        "full_name": full_name,
        "avatar_url": None,
        "total_points": 0,
        "co2_saved": 0.0,
        "total_distance": 0.0,
        "created_at": now,
        "updated_at": now,
    }
    await db[PROFILES_COL].insert_one(doc)
    return _normalize(doc)


async def get_profile(db: AsyncIOMotorDatabase, user_id: str) -> dict:
    try:
        obj_id = ObjectId(user_id)
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="잘못된 사용자 ID") from exc
    doc = await db[PROFILES_COL].find_one({"_id": obj_id})
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="프로필을 찾을 수 없습니다.")
    return _normalize(doc)


async def get_profiles_by_ids(db: AsyncIOMotorDatabase, user_ids: list[ObjectId]) -> dict[str, dict]:
    """작성자 정보 조인용: {user_id 문자열: 프로필}"""
    if not user_ids:
        return {}
    cursor = db[PROFILES_COL].find({"_id": {"$in": list(set(user_ids))}})
    profiles: dict[str, dict] = {}
    async for doc in cursor:
        profile = _normalize(doc)
        profiles[profile["id"]] = profile
    return profiles


def _goal_percent(metric: LeaderboardMetric, profile: dict) -> float | None:
    if metric == LeaderboardMetric.CO2:
        return min(profile["co2_saved"] / CO2_GOAL_KG * 100, 100)
    if metric == LeaderboardMetric.DISTANCE:
        return profile["total_distance"] / EARTH_CIRCUMFERENCE_KM * 100
    return None


async def get_leaderboard(
    db: AsyncIOMotorDatabase,
    metric: LeaderboardMetric,
    current_user_id: str | None = None,
    limit: int = 50,
) -> dict:
    """
    지표별 상위 사용자 목록

    Returns:
        entries(순위/목표 대비 비율 포함), my_rank(목록 밖이면 0),
        community_distance(목록 합계 km), community_earth_percent
    """
    sort_field = LEADERBOARD_SORT_FIELDS[metric]
    cursor = db[PROFILES_COL].find({}).sort(sort_field, -1).limit(limit)

    entries: list[dict] = []
    async for doc in cursor:
        profile = _normalize(doc)
        profile["rank"] = len(entries) + 1
        profile["goal_percent"] = _goal_percent(metric, profile)
        entries.append(profile)

    my_rank = next((e["rank"] for e in entries if e["id"] == current_user_id), 0)
    community_distance = sum(e["total_distance"] for e in entries)
    return {
        "metric": metric,
        "entries": entries,
        "my_rank": my_rank,
        "community_distance": community_distance,
        "community_earth_percent": community_distance / EARTH_CIRCUMFERENCE_KM * 100,
    }
