from sqlalchemy import JSON, Column, DateTime, Float, Index, Integer, String, Text, event
from datetime import datetime, timezone
from agri_advisor.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Interaction(Base):
    __tablename__ = "interactions"

    id = Column(Integer, primary_key=True, index=True)
    location = Column(String, nullable=False)
    query = Column(Text, nullable=False)
    response = Column(Text, nullable=False)
    weather_snapshot = Column(JSON, nullable=False, default=dict)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_interactions_location_created_at", location, created_at.desc()),
        Index("ix_interactions_created_at", created_at.desc()),
    )

    @property
    def coordinates(self) -> dict:
        return {"lat": self.lat, "lon": self.lon}


@event.listens_for(Interaction, "before_update")
def _reject_update(mapper, connection, target):
    raise ValueError(f"Interaction {target.id} is immutable once stored")
