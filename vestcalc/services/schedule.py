import logging
import re

from vestcalc.schemas import ParsedSchedule

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MONTHS = 48
DEFAULT_CLIFF_MONTHS = 12
MAX_SCHEDULE_YEARS = 100

_YEARS_PATTERN = re.compile(r"(?<![\d.])(\d+)\s*year", re.IGNORECASE)


def _months_in(segment: str) -> int | None:
    match = _YEARS_PATTERN.search(segment)
    if match is None:
        return None
    years = int(match.group(1))
    if years > MAX_SCHEDULE_YEARS:
        logger.warning("Vesting period of %d years in %r exceeds %d years", years, segment, MAX_SCHEDULE_YEARS)
        return None
    return years * 12


def parse_schedule_with_status(text: object) -> tuple[ParsedSchedule, bool]:
    """Parse ``"<N> year[s] [/ <M> year[s] cliff]"`` into a schedule.

    Returns the schedule and whether any part of it fell back to the
    4 year / 1 year cliff defaults. Never raises.
    """
    if not isinstance(text, str) or not text.strip():
        logger.debug("No vesting schedule given, using defaults")
        return ParsedSchedule(duration_months=DEFAULT_DURATION_MONTHS, cliff_months=DEFAULT_CLIFF_MONTHS), True

    duration_part, separator, cliff_part = text.partition("/")
    used_default = False

    duration_months = _months_in(duration_part)
    if not duration_months:
        logger.warning("Unparsable vesting duration in %r, using %d months", text, DEFAULT_DURATION_MONTHS)
        duration_months = DEFAULT_DURATION_MONTHS
        used_default = True

    cliff_months = DEFAULT_CLIFF_MONTHS
    if separator:
        parsed_cliff = _months_in(cliff_part)
        if parsed_cliff is None:
            logger.warning("Unparsable vesting cliff in %r, using %d months", text, DEFAULT_CLIFF_MONTHS)
            used_default = True
        else:
            cliff_months = parsed_cliff

    if cliff_months > duration_months:
        logger.warning("Cliff exceeds duration in %r, clamping cliff to %d months", text, duration_months)
        cliff_months = duration_months

    return ParsedSchedule(duration_months=duration_months, cliff_months=cliff_months), used_default


def parse_schedule(text: object) -> ParsedSchedule:
    schedule, _ = parse_schedule_with_status(text)
    return schedule
