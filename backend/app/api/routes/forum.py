from fastapi import APIRouter, Depends, Path, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ...core.auth import get_current_user
from ...dependencies import get_mongo_db
from ...schemas import ForumCommentCreate, ForumCommentOut, ForumPostCreate, ForumPostOut, UserPublic
from ...services import forum as forum_service

router = APIRouter()


@router.get("/posts", response_model=list[ForumPostOut])
async def list_posts(
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> list[ForumPostOut]:
    posts = await forum_service.list_posts(db)
    return [ForumPostOut(**p) for p in posts]


@router.post("/posts", response_model=ForumPostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: ForumPostCreate,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> ForumPostOut:
    post = await forum_service.create_post(db, current_user.id, payload.title, payload.content)
    return ForumPostOut(**post)


@router.get("/posts/{post_id}", response_model=ForumPostOut)
async def get_post(
    post_id: str = Path(..., description="게시글 ID"),
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> ForumPostOut:
    return ForumPostOut(**await forum_service.get_post(db, post_id))


@router.post("/posts/{post_id}/comments", response_model=ForumCommentOut, status_code=status.HTTP_201_CREATED)
async def add_comment(
    payload: ForumCommentCreate,
    post_id: str = Path(..., description="게시글 ID"),
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> ForumCommentOut:
    comment = await forum_service.add_comment(db, post_id, current_user.id, payload.content)
    return ForumCommentOut(**comment)
