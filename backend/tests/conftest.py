from __future__ import annotations

import asyncio
import copy
import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from backend.app.core.auth import get_current_user  # noqa: E402
from backend.app.db.mongo import MongoConnectionManager  # noqa: E402
from backend.app.db.redis import RedisConnectionManager  # noqa: E402
from backend.app.dependencies import get_http_client  # noqa: E402
from backend.app.main import app  # noqa: E402
from backend.app.schemas.user import UserPublic  # noqa: E402


def _matches(doc: dict, query: dict) -> bool:
    for key, cond in query.items():
        value = doc.get(key)
        if isinstance(cond, dict) and any(op.startswith("$") for op in cond):
            for op, arg in cond.items():
                if op == "$in" and value not in arg:
                    return False
                if op == "$ne" and value == arg:
                    return False
        elif value != cond:
            return False
    return True


class _FakeCursor:
    def __init__(self, docs: list[dict]) -> None:
        self._docs = docs

    def sort(self, key: Any, direction: int = 1) -> "_FakeCursor":
        keys = key if isinstance(key, list) else [(key, direction)]
        for field, order in reversed(keys):
            self._docs.sort(key=lambda d: (d.get(field) is None, d.get(field)), reverse=order < 0)
        return self

    def limit(self, count: int) -> "_FakeCursor":
        if count:
            self._docs = self._docs[:count]
        return self

    async def to_list(self, length: int | None = None) -> list[dict]:
        return list(self._docs if length is None else self._docs[:length])

    def __aiter__(self) -> "_FakeCursor":
        self._iter = iter(self._docs)
        return self

    async def __anext__(self) -> dict:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class FakeCollection:
    """motor 컬렉션 중 서비스가 사용하는 연산만 메모리로 흉내냄"""

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict] = []
        self.calls: list[str] = []
        self._failures: dict[str, int] = {}

    def fail(self, operation: str, after: int = 0) -> None:
        """operation이 after번 성공한 뒤부터 OperationFailure 발생"""
        self._failures[operation] = after

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation not in self._failures:
            return
        if self._failures[operation] <= 0:
            raise OperationFailure(f"{self.name}.{operation} rejected")
        self._failures[operation] -= 1

    def seed(self, *docs: dict) -> list[ObjectId]:
        ids = []
        for doc in docs:
            doc = copy.deepcopy(doc)
            doc.setdefault("_id", ObjectId())
            self.docs.append(doc)
            ids.append(doc["_id"])
        return ids

    async def create_index(self, *_args: Any, **_kwargs: Any) -> None:
        return None

    async def insert_one(self, doc: dict) -> SimpleNamespace:
        self._check("insert_one")
        stored = copy.deepcopy(doc)
        stored.setdefault("_id", ObjectId())
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"], acknowledged=True)

    async def find_one(self, query: dict) -> dict | None:
        self._check("find_one")
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: dict | None = None) -> _FakeCursor:
        self._check("find")
        return _FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query or {})])

    async def update_one(self, query: dict, update: dict) -> SimpleNamespace:
        self._check("update_one")
        for doc in self.docs:
            if not _matches(doc, query):
                continue
            for field, value in update.get("$set", {}).items():
                doc[field] = value
            for field, value in update.get("$inc", {}).items():
                doc[field] = doc.get(field, 0) + value
            return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def count_documents(self, query: dict) -> int:
        return sum(1 for d in self.docs if _matches(d, query))


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    async def command(self, name: str) -> dict:
        return {"ok": 1}


class FakePubSub:
    def __init__(self, redis: "FakeRedis") -> None:
        self._redis = redis
        self.channels: set[str] = set()
        self.messages: asyncio.Queue = asyncio.Queue()
        self.closed = False

    async def subscribe(self, *channels: str) -> None:
        self.channels.update(channels)
        self._redis.subscribers.append(self)
        for channel in channels:
            self.messages.put_nowait({"type": "subscribe", "channel": channel, "data": 1})

    async def unsubscribe(self, *channels: str) -> None:
        self.channels.difference_update(channels)

    async def aclose(self) -> None:
        self.closed = True
        if self in self._redis.subscribers:
            self._redis.subscribers.remove(self)

    async def listen(self):
        while True:
            yield await self.messages.get()


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, Any] = {}
        self.published: list[tuple[str, str]] = []
        self.subscribers: list[FakePubSub] = []

    async def get(self, key: str) -> Any:
        return self.store.get(key)

    async def set(self, key: str, value: Any, ex: int | None = None) -> bool:
        self.store[key] = value
        return True

    async def setex(self, key: str, ttl: int, value: Any) -> bool:
        self.store[key] = value
        return True

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def sadd(self, key: str, *members: str) -> int:
        self.store.setdefault(key, set()).update(members)
        return len(members)

    async def srem(self, key: str, *members: str) -> int:
        self.store.get(key, set()).difference_update(members)
        return len(members)

    async def smembers(self, key: str) -> set[str]:
        return set(self.store.get(key, set()))

    async def expire(self, key: str, ttl: int) -> bool:
        return key in self.store

    async def publish(self, channel: str, message: str) -> int:
        self.published.append((channel, message))
        receivers = [sub for sub in self.subscribers if channel in sub.channels]
        for sub in receivers:
            sub.messages.put_nowait({"type": "message", "channel": channel, "data": message})
        return len(receivers)

    def pubsub(self) -> FakePubSub:
        return FakePubSub(self)

    async def aclose(self) -> None:
        return None


class _FakeMongoClient:
    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def __getitem__(self, _name: str) -> FakeDatabase:
        return self._db

    def close(self) -> None:
        return None


class ExternalApis:
    """Nominatim / OpenRouteService / Open-Meteo 응답을 흉내내는 MockTransport 핸들러"""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.places: dict[str, tuple[float, float]] = {}
        self.route: dict | None = {"distance": 2300.0, "duration": 540.0, "geometry": "encoded_polyline"}
        self.route_status = 200
        self.route_raw: bytes | None = None
        self.weather_status = 200
        self.weather_current = {
            "temperature_2m": 11.6,
            "relative_humidity_2m": 81,
            "weather_code": 61,
            "wind_speed_10m": 14.2,
        }

    def hosts(self) -> list[str]:
        return [request.url.host for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if "nominatim" in host:
            query = request.url.params.get("q", "").split(",")[0].strip()
            if query in self.places:
                lat, lng = self.places[query]
                return httpx.Response(200, json=[{"lat": str(lat), "lon": str(lng), "display_name": query}])
            return httpx.Response(200, json=[])
        if "openrouteservice" in host:
            if self.route_raw is not None:
                return httpx.Response(self.route_status, content=self.route_raw)
            if self.route_status != 200:
                return httpx.Response(self.route_status, json={"error": "upstream"})
            if self.route is None:
                return httpx.Response(404, json={"error": {"code": 2010, "message": "no route"}})
            return httpx.Response(
                200,
                json={
                    "routes": [
                        {
                            "summary": {"distance": self.route["distance"], "duration": self.route["duration"]},
                            "geometry": self.route["geometry"],
                        }
                    ]
                },
            )
        if "open-meteo" in host:
            if self.weather_status != 200:
                return httpx.Response(self.weather_status)
            return httpx.Response(200, json={"current": self.weather_current})
        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture(autouse=True)
def stub_infrastructure(monkeypatch: pytest.MonkeyPatch, fake_db: FakeDatabase, fake_redis: FakeRedis):
    """MongoDB/Redis 커넥션을 메모리 구현으로 대체"""
    mongo_client = _FakeMongoClient(fake_db)

    async def _noop_close(cls: type) -> None:
        return None

    monkeypatch.setattr(MongoConnectionManager, "get_client", classmethod(lambda cls: mongo_client))
    monkeypatch.setattr(RedisConnectionManager, "get_client", classmethod(lambda cls: fake_redis))
    monkeypatch.setattr(MongoConnectionManager, "close", classmethod(_noop_close))
    monkeypatch.setattr(RedisConnectionManager, "close", classmethod(_noop_close))
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def external_apis(monkeypatch: pytest.MonkeyPatch) -> ExternalApis:
    from backend.app.core.config import settings

    apis = ExternalApis()
    monkeypatch.setattr(settings, "ors_api_key", "test-ors-key")

    async def _client_override():
        async with apis.client() as client:
            yield client

    app.dependency_overrides[get_http_client] = _client_override
    return apis


def _make_user(db: FakeDatabase, username: str = "jonas", **profile: Any) -> UserPublic:
    """users + profiles 문서를 직접 넣고 UserPublic 반환"""
    now = datetime.utcnow()
    user_id = ObjectId()
    db["users"].seed(
        {
            "_id": user_id,
            "email": f"{username}@example.com",
            "password_hash": "",
            "username": username,
            "full_name": username.title(),
            "created_at": now,
        }
    )
    db["profiles"].seed(
        {
            "_id": user_id,
            "username": username,
            "full_name": username.title(),
            "total_points": profile.get("total_points", 0),
            "co2_saved": profile.get("co2_saved", 0.0),
            "total_distance": profile.get("total_distance", 0.0),
            "created_at": now,
            "updated_at": now,
        }
    )
    return UserPublic(id=str(user_id), email=f"{username}@example.com", username=username, created_at=now)


@pytest.fixture
def user_factory(fake_db: FakeDatabase):
    return lambda username="jonas", **profile: _make_user(fake_db, username, **profile)


@pytest.fixture
def current_user(fake_db: FakeDatabase) -> UserPublic:
    user = _make_user(fake_db)
    app.dependency_overrides[get_current_user] = lambda: user
    return user
