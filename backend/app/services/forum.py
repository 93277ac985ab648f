from __future__ import annotations

from datetime import datetime

from bson import ObjectId
from fastapi import HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from .profiles import get_profiles_by_ids

POSTS_COL = "forum_posts"
COMMENTS_COL = "forum_comments"


def _normalize(doc: dict) -> dict:
    doc = {**doc}
    doc["id"] = str(doc.pop("_id"))
    doc["user_id"] = str(doc["user_id"])
    if "post_id" in doc:
        doc["post_id"] = str(doc["post_id"])
    return doc


def _parse_post_id(post_id: str) -> ObjectId:
    try:
        return ObjectId(post_id)
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="게시글을 찾을 수 없습니다.") from exc


async def _attach_comments_and_authors(db: AsyncIOMotorDatabase, posts: list[dict]) -> list[dict]:
    """게시글마다 댓글(오래된 순)과 작성자 프로필을 붙임"""
    if not posts:
        return []
    post_ids = [post["_id"] for post in posts]
    comments = await db[COMMENTS_COL].find({"post_id": {"$in": post_ids}}).sort("created_at", 1).to_list(length=None)

    author_ids = [post["user_id"] for post in posts] + [comment["user_id"] for comment in comments]
    authors = await get_profiles_by_ids(db, author_ids)

    result: list[dict] = []
    for post in posts:
        item = _normalize(post)
        item["author"] = authors.get(item["user_id"])
        item["comments"] = []
        for comment in comments:
            if comment["post_id"] != post["_id"]:
                continue
            normalized = _normalize(comment)
            normalized["author"] = authors.get(normalized["user_id"])
            item["comments"].append(normalized)
        result.append(item)
    return result


async def list_posts(db: AsyncIOMotorDatabase) -> list[dict]:
    posts = await db[POSTS_COL].find({}).sort("created_at", -1).to_list(length=None)
    return await _attach_comments_and_authors(db, posts)


async def get_post(db: AsyncIOMotorDatabase, post_id: str) -> dict:
    doc = await db[POSTS_COL].find_one({"_id": _parse_post_id(post_id)})
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="게시글을 찾을 수 없습니다.")
    return (await _attach_comments_and_authors(db, [doc]))[0]


async def create_post(db: AsyncIOMotorDatabase, user_id: str, title: str, content: str) -> dict:
    now = datetime.utcnow()
    doc = {
        "user_id": ObjectId(user_id),
        "title": title,
        "content": content,
        "created_at": now,
        "updated_at": now,
    }
    result = await db[POSTS_COL].insert_one(doc)
    doc["_id"] = result.inserted_id
    return (await _attach_comments_and_authors(db, [doc]))[0]


async def add_comment(db: AsyncIOMotorDatabase, post_id: str, user_id: str, content: str) -> dict:
    post_obj_id = _parse_post_id(post_id)
    if not await db[POSTS_COL].find_one({"_id": post_obj_id}):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="게시글을 찾을 수 없습니다.")

    doc = {
        "post_id": post_obj_id,
        "user_id": ObjectId(user_id),
        "content": content,
        "created_at": datetime.utcnow(),
    }
    result = await db[COMMENTS_COL].insert_one(doc)
    doc["_id"] = result.inserted_id
    comment = _normalize(doc)
    authors = await get_profiles_by_ids(db, [doc["user_id"]])
    comment["author"] = authors.get(comment["user_id"])
    return comment
