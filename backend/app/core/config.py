from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    project_name: str = "Green Muenster"
    api_prefix: str = "/api"

    mongodb_uri: str = Field(default="mongodb://mongo:27017")
    mongodb_db: str = Field(default="green_muenster")

    redis_url: str = Field(default="redis://redis:6379/0")

    jwt_secret_key: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=15)
    refresh_token_expire_minutes: int = Field(default=60 * 24 * 7)

    password_hash_scheme: str = Field(default="argon2")

    # OpenRouteService 길찾기 API
    ors_api_key: str = Field(default="")
    ors_base_url: str = Field(default="https://api.openrouteservice.org")

    # Nominatim 지오코딩 (OpenStreetMap)
    nominatim_base_url: str = Field(default="https://nominatim.openstreetmap.org")
    nominatim_user_agent: str = Field(default="green-muenster/0.1")
    geocoding_city: str = Field(default="Muenster, Germany")

    # 날씨 API (Open-Meteo, 키 불필요)
    open_meteo_url: str = Field(default="https://api.open-meteo.com/v1/forecast")
    weather_latitude: float = Field(default=51.9625)
    weather_longitude: float = Field(default=7.6251)
    weather_timezone: str = Field(default="Europe/Berlin")

    http_timeout: float = Field(default=10.0)

    map_tile_url: str = Field(default="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png")

    cors_origins: str = Field(default="http://localhost:5173,http://localhost:3000,http://localhost")

    admin_email: str = Field(default="")  # 챌린지 관리 API 접근용

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
