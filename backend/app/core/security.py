from datetime import datetime, timedelta, timezone
from typing import Any, Literal
from uuid import uuid4

import jwt
from fastapi import HTTPException, status
from passlib.context import CryptContext

from .config import settings

pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")

TokenType = Literal["access", "refresh"]


class TokenError(HTTPException):
    def __init__(self, detail: str = "토큰이 유효하지 않습니다."):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_password_hash(password: str) -> str:
    """설정된 해시 스킴으로 비밀번호 해시 생성"""
    if settings.password_hash_scheme not in pwd_context.schemes():
        raise ValueError(f"지원하지 않는 해시 스킴: {settings.password_hash_scheme}")
    return pwd_context.hash(password, scheme=settings.password_hash_scheme)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def _token_lifetime(token_type: TokenType) -> timedelta:
    if token_type == "access":
        return timedelta(minutes=settings.access_token_expire_minutes)
    return timedelta(minutes=settings.refresh_token_expire_minutes)


def create_token(subject: str, token_type: TokenType, session_id: str) -> tuple[str, str]:
    """토큰과 jti를 함께 반환합니다. 세션 ID는 항상 payload에 포함됩니다."""
    now = datetime.now(timezone.utc)
    jti = uuid4().hex
    payload: dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + _token_lifetime(token_type)).timestamp()),
        "type": token_type,
        "jti": jti,
        "session_id": session_id,
    }
    if token_type == "access":
        payload["role"] = "user"
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, jti


def decode_token(token: str, expected_type: TokenType | None = None) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:  # ExpiredSignatureError, DecodeError 포함
        raise TokenError(detail="토큰 디코딩에 실패했습니다.") from exc

    if "sub" not in payload:
        raise TokenError(detail="토큰에 subject 정보가 없습니다.")
    if expected_type and payload.get("type") != expected_type:
        raise TokenError(detail=f"{expected_type} 토큰이 아닙니다.")
    if not payload.get("session_id"):
        raise TokenError(detail="세션 정보가 없습니다.")
    return payload
