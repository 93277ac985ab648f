from collections.abc import AsyncGenerator

import httpx
from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis

from .core.config import settings
from .db.mongo import MongoConnectionManager
from .db.redis import RedisConnectionManager


async def get_mongo_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    yield MongoConnectionManager.get_database()


async def get_redis() -> AsyncGenerator[Redis, None]:
    # 싱글톤으로 유지하므로 요청 종료 시 닫지 않음
    yield RedisConnectionManager.get_client()


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """외부 API(지오코딩, 길찾기, 날씨) 호출용 클라이언트"""
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        yield client
