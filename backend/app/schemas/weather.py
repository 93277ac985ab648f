from pydantic import BaseModel


class WeatherOut(BaseModel):
    available: bool = True
    temperature: int | None = None  # °C, 반올림
    description: str = "Unknown"
    humidity: float | None = None
    wind_speed: float | None = None
    weather_code: int | None = None
    icon: str = "clouds"  # clear | clouds | rain
