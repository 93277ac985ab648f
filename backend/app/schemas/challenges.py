from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ChallengeType(str, Enum):
    WALKING = "walking"
    JOGGING = "jogging"
    CYCLING = "cycling"
    DISTANCE = "distance"  # 이동 수단과 무관한 거리 챌린지


class TargetUnit(str, Enum):
    KM = "km"
    TRIPS = "trips"
    DAYS = "days"


class ChallengeStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED_BRONZE = "completed_bronze"
    COMPLETED_SILVER = "completed_silver"
    COMPLETED_GOLD = "completed_gold"


class ChallengeCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    type: ChallengeType
    target_value: float = Field(gt=0)
    target_unit: TargetUnit
    points_bronze: int = Field(ge=0)
    points_silver: int = Field(ge=0)
    points_gold: int = Field(ge=0)
    is_active: bool = True


class ChallengeOut(ChallengeCreate):
    id: str
    created_at: datetime | None = None


class UserChallengeOut(BaseModel):
    id: str
    user_id: str
    challenge_id: str
    current_progress: float = 0.0
    status: ChallengeStatus = ChallengeStatus.IN_PROGRESS
    started_at: datetime | None = None
    completed_at: datetime | None = None


class ChallengeProgress(ChallengeOut):
    user_challenge: UserChallengeOut | None = None
    progress: float = Field(default=0.0, description="목표 대비 진행률 (%)")
    achievement_level: str = Field(default="none", description="none | bronze | silver | gold")
    points_at_level: int = 0
