from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorDatabase


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    await db["users"].create_index("email", unique=True)
    await db["profiles"].create_index([("total_points", -1)])
    await db["profiles"].create_index([("co2_saved", -1)])
    await db["profiles"].create_index([("total_distance", -1)])
    await db["trips"].create_index([("user_id", 1), ("created_at", -1)])
    await db["challenges"].create_index("title", unique=True)
    await db["user_challenges"].create_index([("user_id", 1), ("challenge_id", 1)], unique=True)
    await db["user_challenges"].create_index([("user_id", 1), ("status", 1)])
    await db["forum_posts"].create_index([("created_at", -1)])
    await db["forum_comments"].create_index([("post_id", 1), ("created_at", 1)])
