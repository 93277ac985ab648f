from datetime import datetime

from bson import ObjectId
from fastapi import HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.security import get_password_hash, verify_password
from ..schemas.user import UserCreate, UserLogin, UserPublic
from .profiles import create_profile

USERS_COL = "users"


async def find_user_by_email(db: AsyncIOMotorDatabase, email: str) -> dict | None:
    return await db[USERS_COL].find_one({"email": email.lower()})


async def get_user_by_id(db: AsyncIOMotorDatabase, user_id: str) -> dict | None:
    try:
        object_id = ObjectId(user_id)
    except Exception as exc:  # pragma: no cover - 잘못된 ObjectId
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="잘못된 사용자 ID 형식입니다.") from exc
    return await db[USERS_COL].find_one({"_id": object_id})


def document_to_user(doc: dict) -> UserPublic:
    return UserPublic(
        id=str(doc["_id"]),
        email=doc["email"],
        username=doc.get("username", ""),
        full_name=doc.get("full_name", ""),
        email_verified=doc.get("email_verified", False),
        created_at=doc.get("created_at", datetime.utcnow()),
    )


async def create_user(db: AsyncIOMotorDatabase, payload: UserCreate) -> UserPublic:
    """계정을 만들고 누적값이 0인 프로필을 함께 생성"""
    if await find_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="이미 등록된 이메일입니다.")

    now = datetime.utcnow()
    user_doc = {
        "email": payload.email.lower(),
        "password_hash": get_password_hash(payload.password),
        "username": payload.username,
        "full_name": payload.full_name,
        "email_verified": False,
        "created_at": now,
        "updated_at": now,
    }
    result = await db[USERS_COL].insert_one(user_doc)
    user_doc["_id"] = result.inserted_id
    await create_profile(db, result.inserted_id, payload.username, payload.full_name)
    return document_to_user(user_doc)


async def authenticate_user(db: AsyncIOMotorDatabase, payload: UserLogin) -> dict:
    user_doc = await find_user_by_email(db, payload.email)
    if not user_doc or not verify_password(payload.password, user_doc.get("password_hash", "")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="이메일 또는 비밀번호가 올바르지 않습니다.")
    return user_doc
