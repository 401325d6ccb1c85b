from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agri_advisor import schemas
from agri_advisor.database import get_db
from agri_advisor.store import InteractionStore

router = APIRouter(tags=["history"])


# READ recent (optionally for one location), newest first
@router.get("/history", response_model=list[schemas.InteractionOut])
def read_history(
    location: str | None = Query(None, description="Only interactions for this location"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    store = InteractionStore(db)
    if location and location.strip():
        return store.recent_for_location(location, limit=limit)
    return store.recent(limit=limit)
