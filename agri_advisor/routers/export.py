# agri_advisor/routers/export.py
from fastapi import APIRouter, Depends, Query, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from agri_advisor.database import get_db
from agri_advisor.store import InteractionStore
import json, csv, io

router = APIRouter(prefix="/export", tags=["export"])

FIELDNAMES = ["id", "location", "query", "response", "lat", "lon", "created_at", "weather"]
EXPORT_LIMIT = 10000


def parse_delimiter(delim: str) -> str:
    if delim == "tab":
        return "\t"
    if len(delim) == 1:
        return delim
    raise HTTPException(status_code=400, detail="delim must be a single character or 'tab'")


def interactions_to_rows(interactions):
    """Flatten interactions to CSV rows (one row per stored interaction)."""
    rows = []
    for i in interactions:
        rows.append({
            "id": str(i.id),
            "location": i.location,
            "query": i.query,
            "response": i.response,
            "lat": str(i.lat),
            "lon": str(i.lon),
            "created_at": i.created_at.isoformat(),
            # Compact JSON of the snapshot for spreadsheets
            "weather": json.dumps(i.weather_snapshot or {}, ensure_ascii=False),
        })
    return rows


@router.get("/interactions")
def export_interactions_csv(
    delim: str = Query(",", description="Delimiter to use. Use 'tab' for tab. Default=','"),
    location: str | None = Query(None),
    db: Session = Depends(get_db)
):
    """
    Download stored interactions as CSV, newest first.
    Example: /export/interactions?delim=;  or  /export/interactions?delim=tab&location=Nashik
    """
    delimiter = parse_delimiter(delim)

    store = InteractionStore(db)
    if location and location.strip():
        interactions = store.recent_for_location(location, limit=EXPORT_LIMIT)
    else:
        interactions = store.recent(limit=EXPORT_LIMIT)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=FIELDNAMES, delimiter=delimiter, quoting=csv.QUOTE_MINIMAL)
    writer.writeheader()
    for row in interactions_to_rows(interactions):
        writer.writerow(row)

    csv_bytes = buffer.getvalue().encode("utf-8")
    buffer.close()

    return StreamingResponse(
        iter([csv_bytes]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=interactions.csv"}
    )
