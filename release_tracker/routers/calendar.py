"""
Calendar Router

Release calendar for the signed-in user: tracked books whose release date
falls in a given year.
"""

from typing import Annotated

from fastapi import APIRouter, Path

from release_tracker.dependencies import CurrentClaims, DbSession
from release_tracker.schemas.tracking import CalendarResponse
from release_tracker.services.tracking import calendar_releases

router = APIRouter(
    prefix="/calendar",
    tags=["Calendar"],
    responses={
        401: {"description": "Access token required"},
        403: {"description": "Invalid or expired token"},
    },
)


@router.get(
    "/{year}",
    response_model=CalendarResponse,
    summary="Releases in a year",
    description="Tracked books releasing in `year`, earliest first. Books without a release date are left out.",
)
def get_calendar(
    year: Annotated[int, Path(ge=1, le=9999, examples=[2025])],
    claims: CurrentClaims,
    db: DbSession,
) -> CalendarResponse:
    return CalendarResponse(releases=calendar_releases(db, claims.user_id, year))
