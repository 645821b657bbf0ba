# survey.py
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr, ValidationError
from datetime import datetime, timezone
from typing import Optional, Union
import logging

from app.services.sheets import SheetAppendError, SheetBackend, get_sheet

router = APIRouter(prefix="/api/survey", tags=["survey"])
logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "rating")
SUCCESS_MESSAGE = "Thank you! Your response has been recorded."
FALLBACK_ERROR = "Failed to submit survey. Please try again later."


class SurveyIn(BaseModel):
    # All optional: presence is checked by the route so it can answer 400
    name: Optional[str] = None
    email: Optional[str] = None
    # Strict so JSON booleans are refused instead of becoming 0/1
    rating: Optional[Union[StrictStr, StrictInt, StrictFloat]] = None  # expected 1-5, not enforced
    feedback: Optional[str] = None

    def missing_fields(self) -> list[str]:
        missing = []
        for field in REQUIRED_FIELDS:
            value = getattr(self, field)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field)
        return missing

    def to_row(self, timestamp: str) -> list:
        return [timestamp, self.name, self.email, self.rating, self.feedback or ""]


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("")
async def submit_survey(request: Request, sheet: SheetBackend = Depends(get_sheet)):
    """
    Validate a survey response and append it as one spreadsheet row:
      [timestamp, name, email, rating, feedback]
    """
    try:
        data = await request.json()
    except ValueError:
        return _error(400, "Request body must be valid JSON")
    if not isinstance(data, dict):
        return _error(400, "Request body must be a JSON object")

    try:
        payload = SurveyIn.model_validate(data)
    except ValidationError as e:
        bad = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        return _error(400, f"Invalid value for: {', '.join(bad)}")

    missing = payload.missing_fields()
    if missing:
        return _error(
            400, f"Name, email, and rating are required. Missing: {', '.join(missing)}"
        )

    row = payload.to_row(_utcnow_iso())
    try:
        # Google client is blocking; keep it off the event loop
        await run_in_threadpool(sheet.append_row, row)
    except SheetAppendError as e:
        logger.error("[Survey] Append failed: %s", e)
        return _error(500, str(e) or FALLBACK_ERROR)
    except Exception:
        logger.exception("[Survey] Unexpected error while appending")
        return _error(500, FALLBACK_ERROR)

    return {"message": SUCCESS_MESSAGE}
