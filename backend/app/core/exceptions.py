from fastapi import HTTPException, status


class LocationNotFound(HTTPException):
    def __init__(self, location: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"장소를 찾을 수 없습니다: {location}")
        self.location = location


class NoRouteFound(HTTPException):
    def __init__(self, detail: str = "경로를 찾을 수 없습니다."):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class MissingCredentials(HTTPException):
    def __init__(self, service: str):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{service} API 키가 설정되지 않았습니다.",
        )
        self.service = service


class ExternalServiceError(HTTPException):
    def __init__(self, service: str, detail: str):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"{service} 호출 실패: {detail}")
        self.service = service


class PersistenceError(HTTPException):
    """DB 작업 실패. step으로 실패한 단계를 구분합니다."""

    step = "unknown"
    message = "데이터 저장에 실패했습니다."

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"step": self.step, "message": detail or self.message},
        )


class TripInsertError(PersistenceError):
    step = "trip_insert"
    message = "이동 기록 저장에 실패했습니다."


class ProfileUpdateError(PersistenceError):
    step = "profile_update"
    message = "이동 기록은 저장되었지만 프로필 누적값 갱신에 실패했습니다."


class ChallengeProgressError(PersistenceError):
    step = "challenge_progress"
    message = "이동 기록은 저장되었지만 챌린지 진행도 갱신에 실패했습니다."
