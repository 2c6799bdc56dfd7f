import math
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

from vestcalc.schemas import Grant, GrantVestingSummary, ParsedSchedule, VestingFacts
from vestcalc.services.schedule import parse_schedule_with_status

VESTING_INTERVAL_MONTHS = 3


class InvalidVestingInput(ValueError):
    pass


def _require_total_shares(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidVestingInput(f"total_shares must be a number, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidVestingInput(f"total_shares must be a finite whole number, got {value!r}")
        value = int(value)
    if value <= 0:
        raise InvalidVestingInput(f"total_shares must be positive, got {value}")
    return value


def _require_date(value: object, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidVestingInput(f"{field} is not a valid calendar date: {value!r}") from exc
    raise InvalidVestingInput(f"{field} must be a date, got {value!r}")


def months_between(start: date, end: date) -> int:
    """Calendar months from ``start`` to ``end``, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(start: date, months: int) -> date:
    # Jan 31 + 1 month lands on the last day of February
    try:
        return start + relativedelta(months=months)
    except (OverflowError, ValueError) as exc:
        raise InvalidVestingInput(f"Vesting date {months} months after {start} is out of range") from exc


def vested_shares(total_shares: int, months_elapsed: int, schedule: ParsedSchedule) -> int:
    if months_elapsed < schedule.cliff_months:
        return 0
    vested_months = min(months_elapsed, schedule.duration_months)
    return (total_shares * vested_months) // schedule.duration_months


def next_vesting_date(start: date, now: date, months_elapsed: int, schedule: ParsedSchedule) -> date | None:
    if start > now:
        return start
    if months_elapsed < schedule.cliff_months:
        return add_months(start, schedule.cliff_months)
    if months_elapsed >= schedule.duration_months:
        return None
    periods_passed = months_elapsed // VESTING_INTERVAL_MONTHS
    return add_months(start, (periods_passed + 1) * VESTING_INTERVAL_MONTHS)


def next_vesting_amount(total_shares: int, schedule: ParsedSchedule) -> int:
    total_periods = schedule.duration_months // VESTING_INTERVAL_MONTHS
    if total_periods <= 0:
        return 0
    return total_shares // total_periods


def compute_vesting(total_shares: object, start_date: object, schedule: ParsedSchedule, now: object) -> VestingFacts:
    """Vesting state of a grant as of ``now``.

    Shares vest linearly by calendar month once the cliff has passed, with
    events every three months. Raises ``InvalidVestingInput`` for a missing or
    non-positive share count, an invalid date, or a schedule whose cliff is
    longer than its duration.
    """
    return _vesting_facts(
        _require_total_shares(total_shares),
        _require_date(start_date, "start_date"),
        schedule,
        _require_date(now, "now"),
    )


def _vesting_facts(total: int, start: date, schedule: ParsedSchedule, as_of: date) -> VestingFacts:
    if schedule.cliff_months > schedule.duration_months or schedule.duration_months <= 0:
        raise InvalidVestingInput(
            f"Invalid schedule: cliff {schedule.cliff_months} months, duration {schedule.duration_months} months"
        )

    elapsed = months_between(start, as_of)
    vested = vested_shares(total, elapsed, schedule)

    return VestingFacts(
        vested_shares=vested,
        unvested_shares=total - vested,
        next_vesting_date=next_vesting_date(start, as_of, elapsed, schedule),
        next_vesting_amount=next_vesting_amount(total, schedule),
    )


def summarize_grant(grant: Grant, as_of: date) -> GrantVestingSummary:
    total = _require_total_shares(grant.total_shares)
    start = _require_date(grant.vesting_start, "vesting_start")
    schedule, used_default = parse_schedule_with_status(grant.vesting_schedule)
    facts = _vesting_facts(total, start, schedule, _require_date(as_of, "as_of"))

    return GrantVestingSummary(
        name=grant.name,
        as_of=as_of,
        total_shares=total,
        vesting_start=start,
        duration_months=schedule.duration_months,
        cliff_months=schedule.cliff_months,
        used_default_schedule=used_default,
        vested_shares=facts.vested_shares,
        unvested_shares=facts.unvested_shares,
        next_vesting_date=facts.next_vesting_date,
        next_vesting_amount=facts.next_vesting_amount,
    )
