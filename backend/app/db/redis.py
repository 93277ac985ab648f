from redis.asyncio import Redis

from ..core.config import settings


class RedisConnectionManager:
    client: Redis | None = None

    @classmethod
    def get_client(cls) -> Redis:
        if cls.client is None:
            # 세션/캐시/pub-sub 모두 문자열로 주고받음
            cls.client = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
        return cls.client

    @classmethod
    async def close(cls) -> None:
        if cls.client:
            await cls.client.aclose()
            cls.client = None
