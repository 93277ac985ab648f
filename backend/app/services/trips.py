from __future__ import annotations

import logging
from datetime import datetime

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from redis.asyncio import Redis

from ..core.exceptions import ChallengeProgressError, ProfileUpdateError, TripInsertError
from ..schemas.challenges import ChallengeStatus, ChallengeType, TargetUnit
from ..schemas.trips import Reward, TripCreate
from .notifications import publish_challenge_update

logger = logging.getLogger(__name__)

TRIPS_COL = "trips"
PROFILES_COL = "profiles"
USER_CHALLENGES_COL = "user_challenges"
CHALLENGES_COL = "challenges"


def _normalize(doc: dict) -> dict:
    doc = {**doc}
    doc["id"] = str(doc.pop("_id"))
    doc["user_id"] = str(doc["user_id"])
    return doc


def challenge_matches_trip(challenge: dict, transport_mode: str) -> bool:
    """같은 이동 수단이거나 거리 챌린지이고, 단위가 km인 경우만 반영"""
    challenge_type = challenge.get("type")
    type_matches = challenge_type == transport_mode or challenge_type == ChallengeType.DISTANCE.value
    return type_matches and challenge.get("target_unit") == TargetUnit.KM.value


async def _in_progress_enrollments(db: AsyncIOMotorDatabase, user_obj_id: ObjectId) -> list[dict]:
    """진행 중인 참여 목록에 챌린지(type, target_unit)를 붙여 반환"""
    enrollments = await db[USER_CHALLENGES_COL].find(
        {"user_id": user_obj_id, "status": ChallengeStatus.IN_PROGRESS.value}
    ).to_list(length=None)
    if not enrollments:
        return []

    challenge_ids = list({uc["challenge_id"] for uc in enrollments})
    challenges = {
        doc["_id"]: doc
        async for doc in db[CHALLENGES_COL].find({"_id": {"$in": challenge_ids}})
    }
    for uc in enrollments:
        uc["challenge"] = challenges.get(uc["challenge_id"])
    return enrollments


async def save_trip(
    db: AsyncIOMotorDatabase,
    user_id: str,
    trip: TripCreate,
    reward: Reward,
    redis: Redis | None = None,
) -> dict:
    """
    완료된 이동을 저장하고 보상과 챌린지 진행도를 반영합니다.

    1. 이동 기록 저장 (실패 시 이후 단계 중단)
    2. 프로필 누적값(포인트, CO2 절감량, 거리) 증가
    3. 조건에 맞는 진행 중 챌린지의 진행도에 이동 거리 추가

    단계 간 트랜잭션은 없습니다. 2단계 이후 실패해도 앞 단계 결과는 그대로 남고,
    실패한 단계는 PersistenceError 하위 예외의 step으로 구분됩니다.
    같은 이동을 두 번 저장하면 두 번 모두 반영됩니다.
    """
    user_obj_id = ObjectId(user_id)
    transport_mode = trip.transport_mode.value
    now = datetime.utcnow()

    trip_doc = {
        "user_id": user_obj_id,
        "from_location": trip.from_location,
        "to_location": trip.to_location,
        "from_lat": trip.from_lat,
        "from_lng": trip.from_lng,
        "to_lat": trip.to_lat,
        "to_lng": trip.to_lng,
        "transport_mode": transport_mode,
        "distance": trip.distance,
        "co2_saved": reward.co2_saved,
        "points_earned": reward.points,
        "created_at": now,
    }
    try:
        result = await db[TRIPS_COL].insert_one(trip_doc)
    except PyMongoError as exc:
        logger.error("이동 기록 저장 실패 (user=%s): %s", user_id, exc)
        raise TripInsertError() from exc
    trip_doc["_id"] = result.inserted_id

    # $inc로 증가시켜 동시 저장 시에도 누적값이 유실되지 않음
    try:
        profile_result = await db[PROFILES_COL].update_one(
            {"_id": user_obj_id},
            {
                "$inc": {
                    "total_points": reward.points,
                    "co2_saved": reward.co2_saved,
                    "total_distance": trip.distance,
                },
                "$set": {"updated_at": now},
            },
        )
    except PyMongoError as exc:
        logger.error("프로필 누적값 갱신 실패 (user=%s, trip=%s): %s", user_id, result.inserted_id, exc)
        raise ProfileUpdateError() from exc
    if profile_result.matched_count == 0:
        logger.error("프로필 없음 (user=%s, trip=%s)", user_id, result.inserted_id)
        raise ProfileUpdateError("이동 기록은 저장되었지만 프로필을 찾을 수 없습니다.")

    updated_challenges: list[str] = []
    try:
        enrollments = await _in_progress_enrollments(db, user_obj_id)
        for uc in enrollments:
            if not uc["challenge"] or not challenge_matches_trip(uc["challenge"], transport_mode):
                continue
            await db[USER_CHALLENGES_COL].update_one(
                {"_id": uc["_id"]},
                {"$inc": {"current_progress": trip.distance}},
            )
            updated_challenges.append(str(uc["_id"]))
            await publish_challenge_update(
                redis,
                user_id,
                {
                    "event": "UPDATE",
                    "user_challenge_id": str(uc["_id"]),
                    "challenge_id": str(uc["challenge_id"]),
                    "delta": trip.distance,
                },
            )
    except PyMongoError as exc:
        logger.error(
            "챌린지 진행도 갱신 실패 (user=%s, 완료된 갱신=%s): %s", user_id, updated_challenges, exc
        )
        raise ChallengeProgressError() from exc

    logger.info(
        "이동 저장 완료 user=%s mode=%s distance=%.2fkm points=%s challenges=%s",
        user_id,
        transport_mode,
        trip.distance,
        reward.points,
        len(updated_challenges),
    )
    return {
        "trip": _normalize(trip_doc),
        "points_earned": reward.points,
        "co2_saved": reward.co2_saved,
        "updated_challenges": updated_challenges,
    }


async def list_recent_trips(db: AsyncIOMotorDatabase, user_id: str, limit: int = 5) -> list[dict]:
    cursor = db[TRIPS_COL].find({"user_id": ObjectId(user_id)}).sort("created_at", -1).limit(limit)
    trips: list[dict] = []
    async for doc in cursor:
        trips.append(_normalize(doc))
    return trips
