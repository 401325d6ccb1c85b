"""
Request orchestrator for POST /ask.

Runs geocoder -> weather -> prompt -> language model -> store, strictly in
that order. Any failed step raises an AdvisoryError and nothing is stored;
a record is written only after the model has answered.
"""

from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from agri_advisor.clients import GeocoderClient, GeminiClient, WeatherClient
from agri_advisor.errors import (
    AuthFailure,
    InvalidInput,
    LocationNotFound,
    RateLimited,
    RecordValidationError,
    UpstreamFailure,
)
from agri_advisor.logger import get_logger
from agri_advisor.prompts import compose_prompt
from agri_advisor.results import AdapterResult, Outcome
from agri_advisor.schemas import Coordinates, WeatherSnapshot
from agri_advisor.store import InteractionStore

logger = get_logger(__name__)


@dataclass
class AdviceResult:
    response: str
    weather: WeatherSnapshot
    coordinates: Coordinates
    location: str


def _raise_for(result: AdapterResult, step: str):
    if result.outcome is Outcome.AUTH_FAILURE:
        raise AuthFailure(f"{step}: {result.detail}")
    if result.outcome is Outcome.RATE_LIMITED:
        raise RateLimited(f"{step}: {result.detail}")
    raise UpstreamFailure(f"{step}: {result.detail}")


class AdvisoryOrchestrator:
    def __init__(self, geocoder: GeocoderClient, weather: WeatherClient,
                 llm: GeminiClient, store: InteractionStore):
        self.geocoder = geocoder
        self.weather = weather
        self.llm = llm
        self.store = store

    def handle(self, location, query) -> AdviceResult:
        if not isinstance(location, str) or not isinstance(query, str):
            raise InvalidInput("location and query must be strings")
        clean_location = location.strip()
        clean_query = query.strip()
        if not clean_location or not clean_query:
            raise InvalidInput("empty location or query")

        geo = self.geocoder.geocode(clean_location)
        if geo.outcome is Outcome.LOCATION_NOT_FOUND:
            raise LocationNotFound(geo.detail)
        if not geo.ok:
            _raise_for(geo, "geocoder")
        coordinates = geo.data

        conditions = self.weather.current(coordinates)
        if not conditions.ok:
            _raise_for(conditions, "weather")
        weather = conditions.data

        prompt = compose_prompt(clean_location, clean_query, weather)

        generated = self.llm.generate(prompt)
        if not generated.ok:
            _raise_for(generated, "gemini")
        advice = generated.data

        try:
            record = self.store.create(
                location=clean_location,
                query=clean_query,
                response=advice,
                weather=weather,
                coordinates=coordinates,
            )
        except RecordValidationError as e:
            logger.error("Interaction rejected by store validation: %s", e)
            raise UpstreamFailure(f"store: {e}") from e
        except SQLAlchemyError as e:
            logger.exception("Failed to persist interaction")
            raise UpstreamFailure("store: database error") from e

        logger.info("Stored interaction %s for %r", record.id, clean_location)
        return AdviceResult(
            response=advice,
            weather=weather,
            coordinates=coordinates,
            location=location,
        )
