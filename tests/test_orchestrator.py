from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from agri_advisor.clients import GeocoderClient, WeatherClient
from agri_advisor.errors import (
    AuthFailure,
    InvalidInput,
    LocationNotFound,
    RateLimited,
    RecordValidationError,
    UpstreamFailure,
)
from agri_advisor.models import Interaction
from agri_advisor.orchestrator import AdvisoryOrchestrator
from agri_advisor.prompts import compose_prompt
from agri_advisor.results import AdapterResult, Outcome
from agri_advisor.store import InteractionStore

from conftest import ADVICE, NASHIK, SUNNY, make_response


@pytest.fixture
def orchestrator(geocoder, weather, llm, db_session):
    return AdvisoryOrchestrator(geocoder, weather, llm, InteractionStore(db_session))


def record_count(db_session):
    return db_session.query(Interaction).count()


def test_success_stores_exactly_one_record(orchestrator, geocoder, weather, llm, db_session):
    result = orchestrator.handle("Nashik", "When should I sow onions?")

    assert result.response == ADVICE
    assert result.coordinates == NASHIK
    assert result.weather == SUNNY
    assert result.location == "Nashik"

    geocoder.geocode.assert_called_once_with("Nashik")
    weather.current.assert_called_once_with(NASHIK)
    llm.generate.assert_called_once_with(compose_prompt("Nashik", "When should I sow onions?", SUNNY))

    records = db_session.query(Interaction).all()
    assert len(records) == 1
    assert records[0].coordinates == {"lat": 19.99, "lon": 73.78}
    assert records[0].weather_snapshot == SUNNY.model_dump()
    assert records[0].response == ADVICE


def test_returns_location_as_received(orchestrator, geocoder, db_session):
    result = orchestrator.handle("  Nashik ", "When should I sow onions?")
    geocoder.geocode.assert_called_once_with("Nashik")
    assert result.location == "  Nashik "
    assert db_session.query(Interaction).one().location == "Nashik"


@pytest.mark.parametrize("location, query", [
    ("", "When should I sow onions?"),
    ("Nashik", ""),
    ("   ", "When?"),
    (None, "When?"),
    ("Nashik", None),
    (42, "When?"),
])
def test_invalid_input_makes_no_calls(orchestrator, geocoder, weather, llm, db_session, location, query):
    with pytest.raises(InvalidInput):
        orchestrator.handle(location, query)

    geocoder.geocode.assert_not_called()
    weather.current.assert_not_called()
    llm.generate.assert_not_called()
    assert record_count(db_session) == 0


def test_location_not_found_aborts(orchestrator, geocoder, weather, llm, db_session):
    geocoder.geocode.return_value = AdapterResult.failure(Outcome.LOCATION_NOT_FOUND, "no results")

    with pytest.raises(LocationNotFound):
        orchestrator.handle("Atlantis", "What grows here?")

    weather.current.assert_not_called()
    llm.generate.assert_not_called()
    assert record_count(db_session) == 0


@pytest.mark.parametrize("outcome, error", [
    (Outcome.AUTH_FAILURE, AuthFailure),
    (Outcome.RATE_LIMITED, RateLimited),
    (Outcome.OTHER, UpstreamFailure),
])
def test_geocoder_failures_are_classified(orchestrator, geocoder, weather, db_session, outcome, error):
    geocoder.geocode.return_value = AdapterResult.failure(outcome, "geocoder down")
    with pytest.raises(error):
        orchestrator.handle("Nashik", "q")
    weather.current.assert_not_called()
    assert record_count(db_session) == 0


def test_weather_failure_aborts(orchestrator, weather, llm, db_session):
    weather.current.return_value = AdapterResult.failure(Outcome.OTHER, "no current conditions")

    with pytest.raises(UpstreamFailure):
        orchestrator.handle("Nashik", "q")

    llm.generate.assert_not_called()
    assert record_count(db_session) == 0


@pytest.mark.parametrize("status, error", [
    (401, AuthFailure),
    (429, RateLimited),
    (503, UpstreamFailure),
])
def test_weather_status_is_classified(settings, geocoder, llm, db_session, status, error):
    session = MagicMock()
    session.request.return_value = make_response(status, {"error": {"code": status}})
    weather = WeatherClient.from_settings(settings, session)
    orchestrator = AdvisoryOrchestrator(geocoder, weather, llm, InteractionStore(db_session))

    with pytest.raises(error):
        orchestrator.handle("Nashik", "q")

    llm.generate.assert_not_called()
    assert record_count(db_session) == 0


def test_geocoder_non_json_reply_is_location_not_found(settings, weather, llm, db_session):
    res = make_response(200)
    res.json.side_effect = ValueError("Expecting value")
    session = MagicMock()
    session.request.return_value = res
    geocoder = GeocoderClient.from_settings(settings, session)
    orchestrator = AdvisoryOrchestrator(geocoder, weather, llm, InteractionStore(db_session))

    with pytest.raises(LocationNotFound):
        orchestrator.handle("Nashik", "q")

    weather.current.assert_not_called()
    assert record_count(db_session) == 0


def test_llm_auth_failure(orchestrator, llm, db_session):
    llm.generate.return_value = AdapterResult.failure(Outcome.AUTH_FAILURE, "401")
    with pytest.raises(AuthFailure):
        orchestrator.handle("Nashik", "q")
    assert record_count(db_session) == 0


def test_llm_rate_limited(orchestrator, llm, db_session):
    llm.generate.return_value = AdapterResult.failure(Outcome.RATE_LIMITED, "429")
    with pytest.raises(RateLimited):
        orchestrator.handle("Nashik", "q")
    assert record_count(db_session) == 0


def test_llm_other_failure(orchestrator, llm, db_session):
    llm.generate.return_value = AdapterResult.failure(Outcome.OTHER, "empty candidate")
    with pytest.raises(UpstreamFailure):
        orchestrator.handle("Nashik", "q")
    assert record_count(db_session) == 0


@pytest.mark.parametrize("exc", [
    RecordValidationError("response is required"),
    OperationalError("INSERT", {}, Exception("disk full")),
])
def test_persistence_failure_is_generic(geocoder, weather, llm, exc):
    store = MagicMock(spec=InteractionStore)
    store.create.side_effect = exc
    orchestrator = AdvisoryOrchestrator(geocoder, weather, llm, store)

    with pytest.raises(UpstreamFailure):
        orchestrator.handle("Nashik", "q")
    store.create.assert_called_once()
