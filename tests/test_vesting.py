from datetime import date, datetime

import pytest

from vestcalc.schemas import Grant, ParsedSchedule
from vestcalc.services.schedule import parse_schedule
from vestcalc.services.vesting import (
    InvalidVestingInput,
    add_months,
    compute_vesting,
    months_between,
    summarize_grant,
)

STANDARD = ParsedSchedule(duration_months=48, cliff_months=12)
START = date(2025, 1, 1)


def test_months_between_ignores_day_of_month() -> None:
    assert months_between(date(2024, 1, 31), date(2024, 2, 1)) == 1
    assert months_between(date(2024, 1, 1), date(2024, 1, 31)) == 0
    assert months_between(date(2025, 3, 1), date(2025, 1, 1)) == -2


def test_add_months_clamps_to_month_end() -> None:
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)


def test_before_cliff_nothing_vests() -> None:
    facts = compute_vesting(1_000_000, START, parse_schedule("4 year / 1 year cliff"), date(2025, 6, 1))
    assert facts.vested_shares == 0
    assert facts.unvested_shares == 1_000_000
    assert facts.next_vesting_date == date(2026, 1, 1)


def test_halfway_through_schedule() -> None:
    facts = compute_vesting(1_000_000, START, STANDARD, date(2027, 1, 1))
    assert facts.vested_shares == 500_000
    assert facts.unvested_shares == 500_000
    assert facts.next_vesting_date == date(2027, 4, 1)


def test_fully_vested_after_duration() -> None:
    facts = compute_vesting(1_000_000, START, STANDARD, date(2029, 2, 1))
    assert facts.vested_shares == 1_000_000
    assert facts.unvested_shares == 0
    assert facts.next_vesting_date is None
    assert facts.next_vesting_amount == 62_500


def test_grant_not_started_returns_start_as_next_date() -> None:
    facts = compute_vesting(4800, date(2025, 3, 20), STANDARD, date(2025, 3, 10))
    assert facts.vested_shares == 0
    assert facts.next_vesting_date == date(2025, 3, 20)


def test_vested_shares_truncate() -> None:
    facts = compute_vesting(1000, START, ParsedSchedule(duration_months=36, cliff_months=0), date(2025, 2, 1))
    assert facts.vested_shares == 27
    assert facts.unvested_shares == 973
    assert facts.next_vesting_date == date(2025, 4, 1)
    assert facts.next_vesting_amount == 83


def test_short_schedule_has_no_quarterly_amount() -> None:
    facts = compute_vesting(100, START, ParsedSchedule(duration_months=2, cliff_months=0), date(2025, 2, 1))
    assert facts.vested_shares == 50
    assert facts.next_vesting_amount == 0


def test_vesting_is_monotonic_and_balanced() -> None:
    previous = 0
    for offset in range(-6, 60):
        now = add_months(START, offset)
        facts = compute_vesting(999_999, START, STANDARD, now)
        assert facts.vested_shares + facts.unvested_shares == 999_999
        assert facts.vested_shares >= previous
        if offset < 12:
            assert facts.vested_shares == 0
        if offset >= 48:
            assert facts.vested_shares == 999_999
            assert facts.next_vesting_date is None
        else:
            assert facts.next_vesting_date > now
            assert months_between(START, facts.next_vesting_date) % 3 == 0
        previous = facts.vested_shares


def test_accepts_iso_strings_and_datetimes() -> None:
    facts = compute_vesting(1_000_000.0, "2025-01-01", STANDARD, datetime(2027, 1, 1, 9, 30))
    assert facts.vested_shares == 500_000


@pytest.mark.parametrize("total_shares", [0, -5, None, True, "1000", float("nan"), float("inf"), 10.5])
def test_invalid_total_shares_rejected(total_shares) -> None:
    with pytest.raises(InvalidVestingInput):
        compute_vesting(total_shares, START, STANDARD, date(2026, 1, 1))


@pytest.mark.parametrize("start_date", [None, "2025-02-30", "not a date", 20250101])
def test_invalid_start_date_rejected(start_date) -> None:
    with pytest.raises(InvalidVestingInput):
        compute_vesting(1000, start_date, STANDARD, date(2026, 1, 1))


def test_unvalidated_schedule_rejected() -> None:
    schedule = ParsedSchedule.model_construct(duration_months=12, cliff_months=24)
    with pytest.raises(InvalidVestingInput):
        compute_vesting(1000, START, schedule, date(2026, 1, 1))


def test_summarize_grant_runs_full_pipeline() -> None:
    grant = Grant(
        name="Founder 1",
        total_shares=1_000_000,
        vesting_start="2025-01-01",
        vesting_schedule="4 year / 1 year cliff",
    )
    summary = summarize_grant(grant, date(2027, 1, 1))
    assert summary.vesting_start == START
    assert summary.total_shares == 1_000_000
    assert summary.vested_shares == 500_000
    assert summary.next_vesting_date == date(2027, 4, 1)
    assert summary.used_default_schedule is False

    defaulted = summarize_grant(grant.model_copy(update={"vesting_schedule": None}), date(2027, 1, 1))
    assert defaulted.used_default_schedule is True
    assert defaulted.duration_months == 48


def test_oversized_schedule_text_still_computes() -> None:
    facts = compute_vesting(1000, START, parse_schedule("9999 years / 9999 year cliff"), date(2026, 1, 1))
    assert facts.vested_shares == 250
    assert facts.next_vesting_date == date(2026, 4, 1)


def test_vesting_date_beyond_calendar_rejected() -> None:
    with pytest.raises(InvalidVestingInput):
        add_months(date(9999, 6, 1), 12)
    with pytest.raises(InvalidVestingInput):
        compute_vesting(1000, date(9999, 6, 1), STANDARD, date(9999, 7, 1))
