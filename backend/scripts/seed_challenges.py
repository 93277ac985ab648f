"""
뮌스터 기본 챌린지 초기 데이터 삽입 스크립트

제목 기준으로 이미 있으면 갱신하고, 없으면 새로 만듭니다.

    python backend/scripts/seed_challenges.py
"""

import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))

from backend.app.db.mongo import MongoConnectionManager  # noqa: E402
from backend.app.services.challenges import upsert_challenge  # noqa: E402

CHALLENGES = [
    {"title": "Urban Explorer", "description": "Discover Muenster by cycling through different districts",
     "type": "cycling", "target_value": 60, "target_unit": "km",
     "points_bronze": 20, "points_silver": 40, "points_gold": 80},
    {"title": "Weekend Wanderer", "description": "Enjoy peaceful weekend walks around Muenster",
     "type": "walking", "target_value": 50, "target_unit": "km",
     "points_bronze": 18, "points_silver": 35, "points_gold": 70},
    {"title": "Eco Commute Master", "description": "Use eco-friendly transport for your daily commute",
     "type": "cycling", "target_value": 5, "target_unit": "trips",
     "points_bronze": 15, "points_silver": 30, "points_gold": 60},
    {"title": "Park Jogger", "description": "Run through Muenster parks and enjoy nature",
     "type": "jogging", "target_value": 50, "target_unit": "km",
     "points_bronze": 18, "points_silver": 35, "points_gold": 70},
    {"title": "Car-Free Champion", "description": "Go without your car for 7 complete days",
     "type": "walking", "target_value": 7, "target_unit": "days",
     "points_bronze": 25, "points_silver": 50, "points_gold": 100},
    {"title": "Bike Squad Leader", "description": "Complete 100 km of cycling challenges",
     "type": "cycling", "target_value": 100, "target_unit": "km",
     "points_bronze": 30, "points_silver": 60, "points_gold": 120},
    {"title": "Green Tourist", "description": "Walk 10 different interesting locations in Muenster",
     "type": "walking", "target_value": 10, "target_unit": "trips",
     "points_bronze": 20, "points_silver": 40, "points_gold": 80},
    {"title": "Distance Milestone", "description": "Accumulate 150 km of eco-friendly travel",
     "type": "cycling", "target_value": 150, "target_unit": "km",
     "points_bronze": 35, "points_silver": 70, "points_gold": 140},
    {"title": "Jogging Enthusiast", "description": "Complete 60 km of jogging distance",
     "type": "jogging", "target_value": 60, "target_unit": "km",
     "points_bronze": 20, "points_silver": 40, "points_gold": 80},
    {"title": "Carbon Zero Hero", "description": "Save 50 kg of CO2 through eco choices",
     "type": "cycling", "target_value": 50, "target_unit": "km",
     "points_bronze": 40, "points_silver": 80, "points_gold": 160},
    # 이동 수단과 관계없이 km 누적
    {"title": "Green Kilometers", "description": "Cover 100 km on foot, running or by bike",
     "type": "distance", "target_value": 100, "target_unit": "km",
     "points_bronze": 25, "points_silver": 50, "points_gold": 100},
]


async def seed_challenges() -> None:
    db = MongoConnectionManager.get_database()
    print("챌린지 초기 데이터 삽입을 시작합니다...")

    for payload in CHALLENGES:
        challenge, created = await upsert_challenge(db, {**payload, "is_active": True})
        action = "생성" if created else "업데이트"
        print(f"  ✓ {payload['title']}: {action} 완료 (ID: {challenge['id']})")

    total = await db["challenges"].count_documents({})
    print(f"\n총 {total}개의 챌린지가 준비되었습니다.")
    await MongoConnectionManager.close()


if __name__ == "__main__":
    asyncio.run(seed_challenges())
