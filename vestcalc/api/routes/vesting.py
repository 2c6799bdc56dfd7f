import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from vestcalc.api.deps import resolve_as_of
from vestcalc.core.config import Settings, get_settings
from vestcalc.schemas import Grant, GrantVestingSummary, VestingReport
from vestcalc.services.vesting import InvalidVestingInput, summarize_grant

router = APIRouter(prefix="/api/vesting", tags=["vesting"])
logger = logging.getLogger(__name__)


@router.post("/grant", response_model=GrantVestingSummary)
def grant_summary(payload: Grant, as_of: date = Depends(resolve_as_of)) -> GrantVestingSummary:
    try:
        return summarize_grant(payload, as_of)
    except InvalidVestingInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/report", response_model=VestingReport)
def vesting_report(
    payload: list[Grant],
    as_of: date = Depends(resolve_as_of),
    settings: Settings = Depends(get_settings),
) -> VestingReport:
    if len(payload) > settings.max_report_rows:
        raise HTTPException(status_code=400, detail=f"Report exceeds {settings.max_report_rows} grant rows")

    grant_summaries = []
    for index, grant in enumerate(payload):
        try:
            grant_summaries.append(summarize_grant(grant, as_of))
        except InvalidVestingInput as exc:
            logger.error("Vesting report halted at row %d: %s", index, exc)
            raise HTTPException(status_code=400, detail=f"Row {index}: {exc}") from exc

    default_schedule_rows = sum(1 for item in grant_summaries if item.used_default_schedule)
    if default_schedule_rows:
        logger.warning("%d of %d grant rows used the default vesting schedule", default_schedule_rows, len(payload))

    return VestingReport(
        as_of=as_of,
        total_grants=len(grant_summaries),
        total_shares=sum(item.total_shares for item in grant_summaries),
        vested_shares=sum(item.vested_shares for item in grant_summaries),
        unvested_shares=sum(item.unvested_shares for item in grant_summaries),
        default_schedule_rows=default_schedule_rows,
        grant_summaries=grant_summaries,
    )
