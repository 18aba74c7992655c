"""
FastAPI Server for K1 Race Results.

Exposes parsed K1 Speed race results and racer stats to the web client.
Races are parsed from the .eml files in K1_MAIL_DIR.

Run:
    uvicorn server:app --reload --port 8000

Endpoints:
    GET  /health                      - Health check
    GET  /races?location=&racerName=  - Races, filtered and paginated
    GET  /races/locations             - Unique race locations
    GET  /races/{id}                  - Single race by index
    POST /races/refresh               - Reload messages from the mail directory
    GET  /racers                      - Unique racer names
    GET  /racers/{name}               - Stats for one racer
    POST /parse                       - Parse a single submitted message

Example:
    curl "http://localhost:8000/races?location=anaheim&page=1&limit=10"
"""

from datetime import datetime
from functools import partial
from math import ceil
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from dotenv import load_dotenv
load_dotenv()

from core.config import Settings
from core.logging import get_logger
from core.messages import load_mail_directory
from core.parser import parse_race_email
from core.service import RaceDataService

logger = get_logger(__name__)

settings = Settings.from_env()

app = FastAPI(
    title="K1 Race Results",
    description="Race results and racer stats parsed from K1 Speed emails",
    version="1.0.0"
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize once
service = RaceDataService(
    source=partial(load_mail_directory, settings.mail_dir, limit=settings.mail_limit),
    parse=partial(parse_race_email, century_base=settings.century_base),
)


# =============================================================================
# MODELS
# =============================================================================

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ParseRequest(BaseModel):
    subject: str
    text: Optional[str] = None
    html: Optional[str] = None

    @field_validator('subject')
    @classmethod
    def subject_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Subject cannot be empty')
        return v


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


def ok(data, **extra) -> dict:
    """Standard success envelope."""
    return {"success": True, "data": data, **extra}


@app.exception_handler(FileNotFoundError)
def mail_source_missing(request: Request, exc: FileNotFoundError):
    logger.error(f"Mail source unavailable: {exc}")
    return JSONResponse(status_code=503, content={"success": False, "error": str(exc)})


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "k1-race-results", "races": service.race_count}


@app.get("/races")
def get_races(
    location: Optional[str] = None,
    racer_name: Optional[str] = Query(None, alias="racerName"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
):
    """
    Get races, optionally filtered by location, racer and date range.

    Out-of-range page sizes fall back to the default rather than failing.
    """
    if page < 1:
        page = 1
    if limit < 1 or limit > MAX_PAGE_SIZE:
        limit = DEFAULT_PAGE_SIZE

    races = service.get_races(
        location=location,
        racer_name=racer_name,
        start_date=start_date,
        end_date=end_date,
    )

    total = len(races)
    start = (page - 1) * limit
    page_races = races[start:start + limit]

    pagination = Pagination(page=page, limit=limit, total=total, totalPages=ceil(total / limit))
    return ok([r.to_dict() for r in page_races], pagination=pagination.model_dump())


@app.get("/races/locations")
def get_locations():
    """Get all unique race locations."""
    return ok(service.get_locations())


@app.post("/races/refresh")
def refresh_races():
    """Reload and reparse the mail directory."""
    races = service.refresh()
    batch = service.last_batch
    return ok(
        {"count": len(races), "summary": batch.to_dict() if batch else None},
        message=f"Refreshed {len(races)} races",
    )


@app.get("/races/{race_id}")
def get_race(race_id: str):
    """Get a single race by its index."""
    race = service.get_race_by_id(race_id)
    if race is None:
        raise HTTPException(status_code=404, detail="Race not found")
    return ok(race.to_dict())


@app.get("/racers")
def get_racers():
    """Get all unique racer names."""
    return ok(service.get_all_racers())


@app.get("/racers/{name}")
def get_racer(name: str):
    """
    Get stats for a racer.

    Matching is a case-insensitive substring match, so "kevin" finds
    "Kevin Ruiz".
    """
    stats = service.get_racer_stats(name)
    if stats is None:
        raise HTTPException(status_code=404, detail="Racer not found")
    return ok(stats.to_dict())


@app.post("/parse")
def parse_message(req: ParseRequest):
    """Parse one message without adding it to the race collection."""
    parsed = service.parse(req.subject, req.text, req.html)
    if parsed is None:
        raise HTTPException(status_code=422, detail="Subject not recognized")
    return ok(parsed.to_dict(), diagnostics=parsed.diagnostics.to_dict())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
