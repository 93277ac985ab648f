from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TransportMode(str, Enum):
    WALKING = "walking"
    JOGGING = "jogging"
    CYCLING = "cycling"
    DRIVING = "driving"


class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class RouteEstimateRequest(BaseModel):
    from_location: str = Field(min_length=1)
    to_location: str = Field(min_length=1)
    transport_mode: TransportMode = TransportMode.CYCLING


class Reward(BaseModel):
    co2_saved: float  # kg
    points: int


class RouteEstimate(BaseModel):
    from_location: str
    to_location: str
    from_coords: Coordinates
    to_coords: Coordinates
    transport_mode: TransportMode
    distance: float  # km
    duration: float  # 분
    geometry: str | None = None  # 인코딩된 폴리라인
    co2_emissions: dict[TransportMode, float]  # 모드별 예상 배출량 (kg)
    reward: Reward


class TripCreate(BaseModel):
    from_location: str = Field(min_length=1)
    to_location: str = Field(min_length=1)
    from_lat: float | None = None
    from_lng: float | None = None
    to_lat: float | None = None
    to_lng: float | None = None
    transport_mode: TransportMode
    distance: float = Field(ge=0, description="이동 거리 (km)")


class TripOut(TripCreate):
    id: str
    user_id: str
    co2_saved: float
    points_earned: int
    created_at: datetime | None = None


class TripSaveResult(BaseModel):
    trip: TripOut
    points_earned: int
    co2_saved: float
    updated_challenges: list[str] = Field(default_factory=list, description="진행도가 갱신된 참여 ID")


class LocationSuggestions(BaseModel):
    query: str
    suggestions: list[str]
