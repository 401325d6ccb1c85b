"""
Pytest configuration and fixtures
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from agri_advisor import models  # noqa: F401
from agri_advisor.clients import GeocoderClient, GeminiClient, WeatherClient
from agri_advisor.config import Settings
from agri_advisor.database import Base
from agri_advisor.main import create_app
from agri_advisor.results import AdapterResult
from agri_advisor.schemas import Coordinates, WeatherSnapshot

NASHIK = Coordinates(lat=19.99, lon=73.78)
SUNNY = WeatherSnapshot(temperature=31, condition="Sunny", humidity=40, windSpeed=12)
ADVICE = "## Onion sowing\n- Sow the rabi crop from mid-October."


def make_response(status_code=200, payload=None):
    """Stand-in for requests.Response."""
    res = MagicMock()
    res.status_code = status_code
    res.json.return_value = payload
    return res


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        GEO_API_KEY="geo-key",
        WEATHER_API_KEY="weather-key",
        GEMINI_API_KEY="gemini-key",
        GEMINI_MODEL="gemini-test",
        GEOCODER_TIMEOUT=3,
        WEATHER_TIMEOUT=4,
        LLM_TIMEOUT=5,
    )


@pytest.fixture
def geocoder():
    fake = MagicMock(spec=GeocoderClient)
    fake.geocode.return_value = AdapterResult.success(NASHIK)
    return fake


@pytest.fixture
def weather():
    fake = MagicMock(spec=WeatherClient)
    fake.current.return_value = AdapterResult.success(SUNNY)
    return fake


@pytest.fixture
def llm():
    fake = MagicMock(spec=GeminiClient)
    fake.generate.return_value = AdapterResult.success(ADVICE)
    return fake


@pytest.fixture
def app(settings, geocoder, weather, llm):
    """App wired to the in-memory database named by settings.DATABASE_URL"""
    application = create_app(settings, geocoder=geocoder, weather=weather, llm=llm)
    engine = application.state.engine
    Base.metadata.create_all(bind=engine)
    try:
        yield application
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(app):
    session = app.state.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(app):
    return TestClient(app)
