from fastapi import APIRouter

from vestcalc.schemas import ScheduleParseRead, ScheduleParseRequest
from vestcalc.services.schedule import parse_schedule_with_status

router = APIRouter(prefix="/api/schedules", tags=["schedules"])


@router.post("/parse", response_model=ScheduleParseRead)
def parse_schedule_text(payload: ScheduleParseRequest) -> ScheduleParseRead:
    schedule, used_default = parse_schedule_with_status(payload.text)
    return ScheduleParseRead(
        duration_months=schedule.duration_months,
        cliff_months=schedule.cliff_months,
        used_default=used_default,
    )
