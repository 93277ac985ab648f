from .auth import LoginResponse, LogoutResponse, RefreshResponse, SignupResponse
from .challenges import (
    ChallengeCreate,
    ChallengeOut,
    ChallengeProgress,
    ChallengeStatus,
    ChallengeType,
    TargetUnit,
    UserChallengeOut,
)
from .forum import ForumCommentCreate, ForumCommentOut, ForumPostCreate, ForumPostOut
from .profiles import Leaderboard, LeaderboardEntry, LeaderboardMetric, ProfileOut
from .sessions import SessionInfo
from .trips import (
    Coordinates,
    LocationSuggestions,
    Reward,
    RouteEstimate,
    RouteEstimateRequest,
    TransportMode,
    TripCreate,
    TripOut,
    TripSaveResult,
)
from .user import UserCreate, UserLogin, UserPublic
from .weather import WeatherOut

__all__ = [
    "LoginResponse",
    "LogoutResponse",
    "RefreshResponse",
    "SignupResponse",
    "ChallengeCreate",
    "ChallengeOut",
    "ChallengeProgress",
    "ChallengeStatus",
    "ChallengeType",
    "TargetUnit",
    "UserChallengeOut",
    "ForumCommentCreate",
    "ForumCommentOut",
    "ForumPostCreate",
    "ForumPostOut",
    "Leaderboard",
    "LeaderboardEntry",
    "LeaderboardMetric",
    "ProfileOut",
    "SessionInfo",
    "Coordinates",
    "LocationSuggestions",
    "Reward",
    "RouteEstimate",
    "RouteEstimateRequest",
    "TransportMode",
    "TripCreate",
    "TripOut",
    "TripSaveResult",
    "UserCreate",
    "UserLogin",
    "UserPublic",
    "WeatherOut",
]
