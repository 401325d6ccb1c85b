from numbers import Real

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agri_advisor import models
from agri_advisor.errors import RecordValidationError
from agri_advisor.schemas import Coordinates, WeatherSnapshot


class InteractionStore:
    """Insert-only access to the interactions table."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, location: str, query: str, response: str,
               weather: WeatherSnapshot | dict | None, coordinates: Coordinates) -> models.Interaction:
        location = (location or "").strip()
        query = (query or "").strip()
        if not location:
            raise RecordValidationError("location is required")
        if not query:
            raise RecordValidationError("query is required")
        if not response or not response.strip():
            raise RecordValidationError("response is required")
        if coordinates is None or not isinstance(coordinates.lat, Real) or not isinstance(coordinates.lon, Real):
            raise RecordValidationError("coordinates require both lat and lon")

        if isinstance(weather, WeatherSnapshot):
            weather = weather.model_dump()

        db_interaction = models.Interaction(
            location=location,
            query=query,
            response=response,
            weather_snapshot=weather or {},
            lat=coordinates.lat,
            lon=coordinates.lon,
        )
        self.db.add(db_interaction)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(db_interaction)
        return db_interaction

    def recent(self, limit: int = 20) -> list[models.Interaction]:
        return (
            self.db.query(models.Interaction)
            .order_by(models.Interaction.created_at.desc(), models.Interaction.id.desc())
            .limit(limit)
            .all()
        )

    def recent_for_location(self, location: str, limit: int = 20) -> list[models.Interaction]:
        return (
            self.db.query(models.Interaction)
            .filter(models.Interaction.location == location.strip())
            .order_by(models.Interaction.created_at.desc(), models.Interaction.id.desc())
            .limit(limit)
            .all()
        )
