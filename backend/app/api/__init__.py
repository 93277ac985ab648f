from fastapi import APIRouter

from .routes import admin, auth, challenges, config, forum, health, leaderboard, profiles, trips, weather

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(config.router, prefix="/config", tags=["config"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(trips.router, prefix="/trips", tags=["trips"])
api_router.include_router(challenges.router, prefix="/challenges", tags=["challenges"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
api_router.include_router(leaderboard.router, prefix="/leaderboard", tags=["leaderboard"])
api_router.include_router(forum.router, prefix="/forum", tags=["forum"])
api_router.include_router(weather.router, prefix="/weather", tags=["weather"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
