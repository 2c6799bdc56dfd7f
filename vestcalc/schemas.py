from datetime import date

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, model_validator


class Grant(BaseModel):
    """A grant row as supplied by the caller.

    ``total_shares`` and ``vesting_start`` are checked by the calculator.
    ``total_shares`` is strict so booleans and numeric strings reach it
    unconverted and get rejected instead of coerced.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, max_length=120)
    total_shares: StrictInt | StrictFloat | None = None
    vesting_start: date | str | None = None
    vesting_schedule: str | None = Field(default=None, max_length=200)


class ParsedSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration_months: int = Field(gt=0)
    cliff_months: int = Field(default=12, ge=0)

    @model_validator(mode="after")
    def validate_cliff(self) -> "ParsedSchedule":
        if self.cliff_months > self.duration_months:
            raise ValueError("cliff_months cannot exceed duration_months")
        return self


class VestingFacts(BaseModel):
    model_config = ConfigDict(frozen=True)

    vested_shares: int = Field(ge=0)
    unvested_shares: int = Field(ge=0)
    next_vesting_date: date | None
    next_vesting_amount: int = Field(ge=0)


class ScheduleParseRequest(BaseModel):
    text: str | None = None


class ScheduleParseRead(BaseModel):
    duration_months: int
    cliff_months: int
    used_default: bool


class GrantVestingSummary(BaseModel):
    name: str | None
    as_of: date
    total_shares: int
    vesting_start: date
    duration_months: int
    cliff_months: int
    used_default_schedule: bool
    vested_shares: int
    unvested_shares: int
    next_vesting_date: date | None
    next_vesting_amount: int


class VestingReport(BaseModel):
    as_of: date
    total_grants: int
    total_shares: int
    vested_shares: int
    unvested_shares: int
    default_schedule_rows: int
    grant_summaries: list[GrantVestingSummary]
