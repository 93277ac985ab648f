from __future__ import annotations

from datetime import datetime

from bson import ObjectId
from fastapi import HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..schemas.challenges import ChallengeStatus

CHALLENGES_COL = "challenges"
USER_CHALLENGES_COL = "user_challenges"

# 진행률(%) 기준 메달 구간
ACHIEVEMENT_THRESHOLDS = [
    (100, "gold"),
    (66, "silver"),
    (33, "bronze"),
]


def _normalize_challenge(doc: dict) -> dict:
    doc = {**doc}
    doc["id"] = str(doc.pop("_id"))
    return doc


def _normalize_enrollment(doc: dict) -> dict:
    doc = {**doc}
    doc["id"] = str(doc.pop("_id"))
    doc["user_id"] = str(doc["user_id"])
    doc["challenge_id"] = str(doc["challenge_id"])
    return doc


def achievement_level(progress: float) -> str:
    """
    진행률에 따른 메달 등급 (조회 시점 계산)

    참여 문서의 status는 이 값으로 바뀌지 않고 in_progress로 유지됩니다.
    """
    for threshold, level in ACHIEVEMENT_THRESHOLDS:
        if progress >= threshold:
            return level
    return "none"


def points_for_level(challenge: dict, progress: float) -> int:
    if progress >= 100:
        return challenge["points_gold"]
    if progress >= 66:
        return challenge["points_silver"]
    return challenge["points_bronze"]


def progress_percent(current_progress: float, target_value: float) -> float:
    if target_value <= 0:
        return 0.0
    return current_progress / target_value * 100


async def create_challenge(db: AsyncIOMotorDatabase, payload: dict) -> dict:
    doc = {
        "title": payload["title"],
        "description": payload.get("description", ""),
        "type": payload["type"],
        "target_value": payload["target_value"],
        "target_unit": payload["target_unit"],
        "points_bronze": payload["points_bronze"],
        "points_silver": payload["points_silver"],
        "points_gold": payload["points_gold"],
        "is_active": payload.get("is_active", True),
        "created_at": datetime.utcnow(),
    }
    result = await db[CHALLENGES_COL].insert_one(doc)
    doc["_id"] = result.inserted_id
    return _normalize_challenge(doc)


async def upsert_challenge(db: AsyncIOMotorDatabase, payload: dict) -> tuple[dict, bool]:
    """제목 기준으로 갱신하거나 새로 생성. (챌린지, 생성 여부)"""
    existing = await db[CHALLENGES_COL].find_one({"title": payload["title"]})
    if not existing:
        return await create_challenge(db, payload), True

    fields = {k: v for k, v in payload.items() if k != "title"}
    await db[CHALLENGES_COL].update_one({"_id": existing["_id"]}, {"$set": fields})
    return _normalize_challenge({**existing, **fields}), False


async def list_challenges_with_progress(db: AsyncIOMotorDatabase, user_id: str) -> list[dict]:
    user_obj_id = ObjectId(user_id)
    enrollments = {
        doc["challenge_id"]: doc
        async for doc in db[USER_CHALLENGES_COL].find({"user_id": user_obj_id})
    }

    result: list[dict] = []
    async for doc in db[CHALLENGES_COL].find({"is_active": True}).sort("created_at", 1):
        challenge = _normalize_challenge(doc)
        enrollment = enrollments.get(doc["_id"])
        progress = (
            progress_percent(enrollment.get("current_progress", 0), challenge["target_value"])
            if enrollment
            else 0.0
        )
        challenge["user_challenge"] = _normalize_enrollment(enrollment) if enrollment else None
        challenge["progress"] = progress
        challenge["achievement_level"] = achievement_level(progress)
        challenge["points_at_level"] = points_for_level(challenge, progress) if enrollment else 0
        result.append(challenge)
    return result


async def start_challenge(db: AsyncIOMotorDatabase, user_id: str, challenge_id: str) -> dict:
    try:
        challenge_obj_id = ObjectId(challenge_id)
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="잘못된 챌린지 ID") from exc

    challenge = await db[CHALLENGES_COL].find_one({"_id": challenge_obj_id, "is_active": True})
    if not challenge:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="챌린지를 찾을 수 없습니다.")

    user_obj_id = ObjectId(user_id)
    existing = await db[USER_CHALLENGES_COL].find_one({"user_id": user_obj_id, "challenge_id": challenge_obj_id})
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="이미 참여 중인 챌린지입니다.")

    doc = {
        "user_id": user_obj_id,
        "challenge_id": challenge_obj_id,
        "current_progress": 0.0,
        "status": ChallengeStatus.IN_PROGRESS.value,
        "started_at": datetime.utcnow(),
        "completed_at": None,
    }
    result = await db[USER_CHALLENGES_COL].insert_one(doc)
    doc["_id"] = result.inserted_id
    return _normalize_enrollment(doc)
