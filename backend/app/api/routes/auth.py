from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis

from ...core.auth import get_current_token, get_current_user, http_bearer
from ...core.config import settings
from ...core.security import TokenError, create_token, decode_token
from ...dependencies import get_mongo_db, get_redis
from ...schemas import (
    LoginResponse,
    LogoutResponse,
    RefreshResponse,
    SessionInfo,
    SignupResponse,
    UserCreate,
    UserLogin,
    UserPublic,
)
from ...services import sessions as session_service
from ...services import users as user_service

router = APIRouter()


def _client_info(request: Request) -> tuple[str | None, str | None]:
    client_ip = request.client.host if request.client else None
    return client_ip, request.headers.get("user-agent")


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=False,
        samesite="strict",
        max_age=settings.refresh_token_expire_minutes * 60,
        path=f"{settings.api_prefix}/auth",
    )


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: UserCreate, db: AsyncIOMotorDatabase = Depends(get_mongo_db)) -> SignupResponse:
    user = await user_service.create_user(db, payload)
    return SignupResponse(user=user)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: UserLogin,
    request: Request,
    response: Response,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    redis: Redis = Depends(get_redis),
) -> LoginResponse:
    user = user_service.document_to_user(await user_service.authenticate_user(db, payload))

    session_id = session_service.new_session_id()
    access_token, access_jti = create_token(user.id, "access", session_id)
    refresh_token, refresh_jti = create_token(user.id, "refresh", session_id)

    client_ip, user_agent = _client_info(request)
    await session_service.create_session(
        redis,
        session_id=session_id,
        user_id=user.id,
        access_jti=access_jti,
        refresh_jti=refresh_jti,
        ip=client_ip,
        user_agent=user_agent,
    )
    _set_refresh_cookie(response, refresh_token)
    return LoginResponse(access_token=access_token, user=user)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    request: Request,
    response: Response,
    refresh_token: str | None = Cookie(default=None, alias="refresh_token"),
    redis: Redis = Depends(get_redis),
) -> RefreshResponse:
    if not refresh_token:
        raise TokenError(detail="리프레시 토큰이 없습니다.")

    payload = decode_token(refresh_token, expected_type="refresh")
    session_id = payload["session_id"]

    session = await session_service.get_session(redis, session_id)
    if session is None or session.get("status") != "active":
        raise TokenError(detail="세션이 만료되었거나 존재하지 않습니다.")
    if session.get("refresh_jti") != payload.get("jti"):
        raise TokenError(detail="토큰이 교체되었습니다. 다시 로그인해 주세요.")
    if not await session_service.consume_refresh_token(redis, payload.get("jti")):
        raise TokenError(detail="만료되었거나 취소된 리프레시 토큰입니다.")

    access_token, access_jti = create_token(payload["sub"], "access", session_id)
    new_refresh_token, new_refresh_jti = create_token(payload["sub"], "refresh", session_id)
    await session_service.rotate_tokens(redis, session_id, payload["sub"], access_jti, new_refresh_jti)

    client_ip, user_agent = _client_info(request)
    await session_service.touch_session(redis, session_id, ip=client_ip, user_agent=user_agent)
    _set_refresh_cookie(response, new_refresh_token)
    return RefreshResponse(access_token=access_token)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    refresh_token: str | None = Cookie(default=None, alias="refresh_token"),
    redis: Redis = Depends(get_redis),
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> LogoutResponse:
    session_id: str | None = None
    for token in (refresh_token, credentials.credentials if credentials else None):
        if not token:
            continue
        try:
            session_id = decode_token(token)["session_id"]
            break
        except TokenError:
            continue

    response.delete_cookie(key="refresh_token", path=f"{settings.api_prefix}/auth")
    if session_id:
        await session_service.revoke_session(redis, session_id, reason="logout")
    return LogoutResponse()


@router.get("/sessions", response_model=list[SessionInfo])
async def list_sessions(
    token_payload: dict = Depends(get_current_token),
    redis: Redis = Depends(get_redis),
) -> list[SessionInfo]:
    current_session_id = token_payload["session_id"]
    sessions = await session_service.list_sessions(redis, token_payload["sub"])
    return [
        SessionInfo(
            session_id=session["session_id"],
            status=session.get("status", "unknown"),
            created_at=session.get("created_at"),
            last_seen=session.get("last_seen"),
            ip=session.get("ip"),
            user_agent=session.get("user_agent"),
            is_current=session["session_id"] == current_session_id,
        )
        for session in sessions
    ]


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_session(
    session_id: str,
    token_payload: dict = Depends(get_current_token),
    redis: Redis = Depends(get_redis),
) -> Response:
    session = await session_service.get_session(redis, session_id)
    if session is None or session.get("user_id") != token_payload["sub"]:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="세션을 찾을 수 없습니다.")
    await session_service.revoke_session(redis, session_id, reason="user_revoked")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserPublic)
async def me(current_user: UserPublic = Depends(get_current_user)) -> UserPublic:
    return current_user
