from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class LeaderboardMetric(str, Enum):
    POINTS = "points"
    CO2 = "co2"
    DISTANCE = "distance"


class ProfileOut(BaseModel):
    id: str
    username: str
    full_name: str = ""
    avatar_url: str | None = None
    total_points: int = 0
    co2_saved: float = 0.0
    total_distance: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LeaderboardEntry(ProfileOut):
    rank: int
    goal_percent: float | None = None  # CO2: 1톤 목표 대비, 거리: 지구 둘레 대비


class Leaderboard(BaseModel):
    metric: LeaderboardMetric
    entries: list[LeaderboardEntry]
    my_rank: int = 0  # 목록 밖이면 0
    community_distance: float = 0.0
    community_earth_percent: float = 0.0
