from fastapi import APIRouter, Response, status

from ...db.mongo import MongoConnectionManager

router = APIRouter()


@router.get("/health", summary="애플리케이션 헬스체크")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready", summary="MongoDB 연결 확인")
async def readiness(response: Response) -> dict[str, str]:
    if not await MongoConnectionManager.ping():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable"}
    return {"status": "ok"}
