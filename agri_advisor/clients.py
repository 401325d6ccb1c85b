"""
Upstream adapters: geocoder (OpenCage), weather (WeatherAPI.com) and the
language model (Google Generative Language).

Each client owns request construction and response unwrapping for one
upstream and reports back an AdapterResult. Nothing here retries or caches.
"""

import requests
from pydantic import ValidationError

from agri_advisor.config import Settings
from agri_advisor.logger import get_logger
from agri_advisor.results import AdapterResult, Outcome
from agri_advisor.schemas import Coordinates, WeatherSnapshot

logger = get_logger(__name__)


class UpstreamClient:
    name = "upstream"
    # outcome for a 2xx reply whose body is not JSON
    malformed_outcome = Outcome.OTHER

    def __init__(self, api_key: str, base_url: str, timeout: float, session=None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # one call per request through the requests module unless a session is injected
        self.http = session or requests

    def _send(self, method: str, url: str, **kwargs):
        """Perform one call. Returns (payload, None) on a 2xx JSON body, else (None, failure)."""
        try:
            res = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout:
            logger.warning("%s request timed out after %ss", self.name, self.timeout)
            return None, AdapterResult.failure(Outcome.OTHER, f"{self.name} timed out")
        except requests.RequestException as e:
            logger.warning("%s request failed: %s", self.name, e)
            return None, AdapterResult.failure(Outcome.OTHER, f"{self.name} unreachable: {e}")

        if res.status_code == 401:
            logger.error("%s rejected the API key (401)", self.name)
            return None, AdapterResult.failure(Outcome.AUTH_FAILURE, f"{self.name} returned 401")
        if res.status_code == 429:
            logger.warning("%s rate limit hit (429)", self.name)
            return None, AdapterResult.failure(Outcome.RATE_LIMITED, f"{self.name} returned 429")
        if not 200 <= res.status_code < 300:
            logger.warning("%s returned HTTP %s", self.name, res.status_code)
            return None, AdapterResult.failure(Outcome.OTHER, f"{self.name} returned {res.status_code}")

        try:
            return res.json(), None
        except ValueError:
            logger.warning("%s returned a non-JSON body", self.name)
            return None, AdapterResult.failure(self.malformed_outcome, f"{self.name} returned invalid JSON")


class GeocoderClient(UpstreamClient):
    name = "geocoder"
    malformed_outcome = Outcome.LOCATION_NOT_FOUND

    @classmethod
    def from_settings(cls, settings: Settings, session=None):
        return cls(settings.GEO_API_KEY, settings.GEO_BASE_URL, settings.GEOCODER_TIMEOUT, session)

    def geocode(self, location: str) -> AdapterResult:
        """Resolve free text to the first result's coordinates."""
        data, failed = self._send(
            "GET",
            f"{self.base_url}/geocode/v1/json",
            params={"q": location, "key": self.api_key},
        )
        if failed:
            return failed

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            logger.info("No geocoding results for %r", location)
            return AdapterResult.failure(Outcome.LOCATION_NOT_FOUND, f"no results for {location!r}")

        try:
            geometry = results[0]["geometry"]
            coords = Coordinates(lat=geometry["lat"], lon=geometry["lng"])
        except (KeyError, TypeError, ValidationError):
            logger.warning("Malformed geocoding result for %r", location)
            return AdapterResult.failure(Outcome.LOCATION_NOT_FOUND, "malformed geocoding result")

        return AdapterResult.success(coords)


class WeatherClient(UpstreamClient):
    name = "weather"

    @classmethod
    def from_settings(cls, settings: Settings, session=None):
        return cls(settings.WEATHER_API_KEY, settings.WEATHER_BASE_URL, settings.WEATHER_TIMEOUT, session)

    def current(self, coordinates: Coordinates) -> AdapterResult:
        """Current conditions at the coordinates, normalized to a WeatherSnapshot."""
        data, failed = self._send(
            "GET",
            f"{self.base_url}/v1/current.json",
            params={"key": self.api_key, "q": f"{coordinates.lat},{coordinates.lon}"},
        )
        if failed:
            return failed

        current = data.get("current") if isinstance(data, dict) else None
        if not isinstance(current, dict):
            logger.warning("Weather response has no current conditions")
            return AdapterResult.failure(Outcome.OTHER, "weather unavailable: no current conditions")

        condition = current.get("condition") or {}
        try:
            snapshot = WeatherSnapshot(
                temperature=current.get("temp_c"),
                condition=condition.get("text") if isinstance(condition, dict) else None,
                humidity=current.get("humidity"),
                windSpeed=current.get("wind_kph"),
                feelsLike=current.get("feelslike_c"),
                uvIndex=current.get("uv"),
            )
        except ValidationError as e:
            logger.warning("Weather response has unexpected field types: %s", e)
            return AdapterResult.failure(Outcome.OTHER, "weather unavailable: malformed conditions")

        return AdapterResult.success(snapshot)


class GeminiClient(UpstreamClient):
    name = "gemini"

    def __init__(self, api_key, base_url, timeout, model: str, session=None):
        super().__init__(api_key, base_url, timeout, session)
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings, session=None):
        return cls(
            settings.GEMINI_API_KEY,
            settings.GEMINI_BASE_URL,
            settings.LLM_TIMEOUT,
            settings.GEMINI_MODEL,
            session,
        )

    def generate(self, prompt: str) -> AdapterResult:
        """Single-turn generation; returns the first candidate's first text part."""
        payload = {
            "contents": [
                {
                    "parts": [{"text": prompt}]
                }
            ]
        }
        data, failed = self._send(
            "POST",
            f"{self.base_url}/v1beta/models/{self.model}:generateContent",
            params={"key": self.api_key},
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        if failed:
            return failed

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            logger.warning("Unexpected Gemini response format: %s", str(data)[:300])
            return AdapterResult.failure(Outcome.OTHER, "no candidate text in response")

        if not isinstance(text, str) or not text.strip():
            logger.warning("Gemini returned an empty candidate")
            return AdapterResult.failure(Outcome.OTHER, "empty candidate text")

        return AdapterResult.success(text)
