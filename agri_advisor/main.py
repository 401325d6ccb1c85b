# Entrypoint for FastAPI app
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from agri_advisor import models  # noqa: F401  (registers tables on Base)
from agri_advisor.clients import GeocoderClient, GeminiClient, WeatherClient
from agri_advisor.config import Settings, get_settings
from agri_advisor.database import Base, make_engine, make_session_factory
from agri_advisor.errors import InvalidInput
from agri_advisor.logger import get_logger, setup_logging
from agri_advisor.routers import advice, export, history

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create tables
    Base.metadata.create_all(bind=app.state.engine)
    logger.info("%s %s ready", app.title, app.version)
    yield
    app.state.engine.dispose()


async def ask_validation_handler(request: Request, exc: RequestValidationError):
    # /ask keeps its fixed 400 body for malformed or missing fields
    if request.url.path == "/ask":
        logger.info("Rejected /ask body: %s", exc.errors())
        return advice.error_response(InvalidInput())
    return await request_validation_exception_handler(request, exc)


def create_app(settings: Settings | None = None, geocoder=None, weather=None, llm=None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, debug=settings.DEBUG, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = make_engine(settings.DATABASE_URL)
    app.state.SessionLocal = make_session_factory(app.state.engine)
    app.state.geocoder = geocoder or GeocoderClient.from_settings(settings)
    app.state.weather = weather or WeatherClient.from_settings(settings)
    app.state.llm = llm or GeminiClient.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, ask_validation_handler)

    app.include_router(advice.router)
    app.include_router(history.router)
    app.include_router(export.router)
    return app


app = create_app()


def run():
    import uvicorn

    settings = get_settings()
    uvicorn.run("agri_advisor.main:app", host=settings.HOST, port=settings.PORT)
