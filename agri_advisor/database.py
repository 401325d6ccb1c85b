from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def make_engine(url: str, **kwargs):
    # sqlite connections are shared with FastAPI's threadpool
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    # an in-memory database lives on a single connection
    if url in IN_MEMORY_URLS:
        kwargs.setdefault("poolclass", StaticPool)
    return create_engine(url, **kwargs)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


Base = declarative_base()


def get_db(request: Request):
    """Session from the factory create_app put on app.state."""
    db = request.app.state.SessionLocal()
    try:
        yield db
    finally:
        db.close()
