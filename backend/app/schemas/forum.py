from datetime import datetime

from pydantic import BaseModel, Field

from .profiles import ProfileOut


class ForumPostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)


class ForumCommentCreate(BaseModel):
    content: str = Field(min_length=1)


class ForumCommentOut(BaseModel):
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime | None = None
    author: ProfileOut | None = None


class ForumPostOut(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: ProfileOut | None = None
    comments: list[ForumCommentOut] = Field(default_factory=list)
