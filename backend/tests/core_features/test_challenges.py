"""
챌린지 목록/참여/메달 등급
"""
import pytest
from bson import ObjectId
from fastapi import HTTPException

from backend.app.services.challenges import (
    achievement_level,
    list_challenges_with_progress,
    points_for_level,
    start_challenge,
    upsert_challenge,
)

URBAN_EXPLORER = {
    "title": "Urban Explorer",
    "description": "Discover Muenster by cycling through different districts",
    "type": "cycling",
    "target_value": 60,
    "target_unit": "km",
    "points_bronze": 20,
    "points_silver": 40,
    "points_gold": 80,
    "is_active": True,
}


@pytest.mark.parametrize(
    ("progress", "level"),
    [(0, "none"), (32.9, "none"), (33, "bronze"), (65.9, "bronze"), (66, "silver"), (99.9, "silver"), (100, "gold"), (140, "gold")],
)
def test_achievement_level_thresholds(progress, level):
    assert achievement_level(progress) == level


def test_points_for_level_uses_tier_rewards():
    assert points_for_level(URBAN_EXPLORER, 10) == 20
    assert points_for_level(URBAN_EXPLORER, 70) == 40
    assert points_for_level(URBAN_EXPLORER, 100) == 80


@pytest.mark.asyncio
async def test_upsert_creates_then_updates_by_title(fake_db):
    created, was_created = await upsert_challenge(fake_db, URBAN_EXPLORER)
    updated, was_created_again = await upsert_challenge(fake_db, {**URBAN_EXPLORER, "target_value": 75})

    assert was_created is True
    assert was_created_again is False
    assert created["id"] == updated["id"]
    assert len(fake_db["challenges"].docs) == 1
    assert fake_db["challenges"].docs[0]["target_value"] == 75


@pytest.mark.asyncio
async def test_list_reports_progress_and_level(fake_db, current_user):
    challenge, _ = await upsert_challenge(fake_db, URBAN_EXPLORER)
    await upsert_challenge(fake_db, {**URBAN_EXPLORER, "title": "Retired", "is_active": False})
    fake_db["user_challenges"].seed(
        {
            "user_id": ObjectId(current_user.id),
            "challenge_id": ObjectId(challenge["id"]),
            "current_progress": 42.0,
            "status": "in_progress",
        }
    )

    challenges = await list_challenges_with_progress(fake_db, current_user.id)

    assert [c["title"] for c in challenges] == ["Urban Explorer"]
    item = challenges[0]
    assert item["progress"] == pytest.approx(70.0)
    assert item["achievement_level"] == "silver"
    assert item["points_at_level"] == 40
    assert item["user_challenge"]["status"] == "in_progress"


@pytest.mark.asyncio
async def test_list_without_enrollment(fake_db, current_user):
    await upsert_challenge(fake_db, URBAN_EXPLORER)

    item = (await list_challenges_with_progress(fake_db, current_user.id))[0]

    assert item["user_challenge"] is None
    assert item["progress"] == 0
    assert item["achievement_level"] == "none"


@pytest.mark.asyncio
async def test_start_challenge_creates_in_progress_enrollment(fake_db, current_user):
    challenge, _ = await upsert_challenge(fake_db, URBAN_EXPLORER)

    enrollment = await start_challenge(fake_db, current_user.id, challenge["id"])

    assert enrollment["current_progress"] == 0
    assert enrollment["status"] == "in_progress"
    assert enrollment["challenge_id"] == challenge["id"]


@pytest.mark.asyncio
async def test_start_challenge_twice_conflicts(fake_db, current_user):
    challenge, _ = await upsert_challenge(fake_db, URBAN_EXPLORER)
    await start_challenge(fake_db, current_user.id, challenge["id"])

    with pytest.raises(HTTPException) as exc_info:
        await start_challenge(fake_db, current_user.id, challenge["id"])
    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_start_unknown_or_inactive_challenge(fake_db, current_user):
    inactive, _ = await upsert_challenge(fake_db, {**URBAN_EXPLORER, "is_active": False})

    with pytest.raises(HTTPException) as exc_info:
        await start_challenge(fake_db, current_user.id, inactive["id"])
    assert exc_info.value.status_code == 404

    with pytest.raises(HTTPException) as exc_info:
        await start_challenge(fake_db, current_user.id, "not-an-id")
    assert exc_info.value.status_code == 400
