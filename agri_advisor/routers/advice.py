from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from agri_advisor.database import get_db
from agri_advisor.errors import AdvisoryError, UpstreamFailure
from agri_advisor.logger import get_logger
from agri_advisor.orchestrator import AdvisoryOrchestrator
from agri_advisor.schemas import AskRequest, AskResponse, ErrorResponse, HealthResponse
from agri_advisor.store import InteractionStore

logger = get_logger(__name__)

router = APIRouter(tags=["advice"])


def get_orchestrator(request: Request, db: Session = Depends(get_db)) -> AdvisoryOrchestrator:
    """One orchestrator per request: shared upstream clients, request-scoped store."""
    state = request.app.state
    return AdvisoryOrchestrator(
        geocoder=state.geocoder,
        weather=state.weather,
        llm=state.llm,
        store=InteractionStore(db),
    )


def error_response(error: AdvisoryError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def ask(payload: AskRequest, orchestrator: AdvisoryOrchestrator = Depends(get_orchestrator)):
    try:
        result = orchestrator.handle(payload.location, payload.query)
    except AdvisoryError as e:
        logger.warning("Error processing request: %s (%s)", type(e).__name__, e.detail)
        return error_response(e)
    except Exception:
        logger.exception("Unexpected error processing request")
        return error_response(UpstreamFailure())

    return AskResponse(
        response=result.response,
        weather=result.weather,
        coordinates=result.coordinates,
        location=result.location,
    )


@router.get("/health", response_model=HealthResponse)
def health():
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {"status": "OK", "timestamp": timestamp}
