from pydantic import BaseModel
from datetime import datetime


class Coordinates(BaseModel):
    lat: float
    lon: float


class WeatherSnapshot(BaseModel):
    # provider values are passed through as-is, so 31 stays 31 rather than 31.0
    temperature: int | float | None = None
    condition: str | None = None
    humidity: int | float | None = None
    windSpeed: int | float | None = None
    feelsLike: int | float | None = None
    uvIndex: int | float | None = None


class AskRequest(BaseModel):
    location: str | None = None
    query: str | None = None


class AskResponse(BaseModel):
    response: str
    weather: WeatherSnapshot
    coordinates: Coordinates
    location: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class InteractionOut(BaseModel):
    id: int
    location: str
    query: str
    response: str
    weather_snapshot: dict
    coordinates: Coordinates
    created_at: datetime

    model_config = {"from_attributes": True}
