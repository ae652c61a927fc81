#!/usr/bin/env python3
"""
Structural Compatibility - availability and location checks.

Both checks answer "can this freelancer take this job?" from structured
fields alone. They are lenient: whenever the job does not say enough to
decide, the freelancer is considered compatible.

Postcodes are Dutch (4 digits + 2 letters, e.g. "1312AB"); distance is
approximated by the difference of the numeric parts.
"""
from typing import Any, Mapping, Optional
import logging
import re

from dateutil import parser as date_parser

from core.config_loader import CompatibilityRulesConfig

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
TIMES_OF_DAY = ("morning", "afternoon", "evening")

_MORNING = re.compile(r"morning|(?<![a-z])am\b")
_AFTERNOON = re.compile(r"afternoon")
_EVENING = re.compile(r"evening|night|(?<![a-z])pm\b")
_POSTCODE_DIGITS = re.compile(r"\d+")


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def required_weekday(date_text: Any) -> Optional[str]:
    """Weekday name for a job date such as '2024-06-01', or None if unparseable."""
    if not isinstance(date_text, str) or not date_text.strip():
        return None
    try:
        parsed = date_parser.parse(date_text)
    except (ValueError, OverflowError):
        logger.debug(f"Could not parse job date '{date_text}'")
        return None
    return WEEKDAY_NAMES[parsed.weekday()]


def required_time_of_day(time_window: Any) -> Optional[str]:
    """
    The part of the day a job needs: time_of_day when set, otherwise inferred
    from the free-text time ('10:00 am' -> morning, '8pm' -> evening).
    """
    tw = _mapping(time_window)

    time_of_day = tw.get("time_of_day")
    if isinstance(time_of_day, str) and time_of_day.strip():
        return time_of_day.strip().lower()

    time_text = tw.get("time")
    if not isinstance(time_text, str):
        return None
    time_text = time_text.lower()

    if _MORNING.search(time_text):
        return "morning"
    if _AFTERNOON.search(time_text):
        return "afternoon"
    if _EVENING.search(time_text):
        return "evening"
    return None


def check_availability(availability: Any, time_window: Any) -> bool:
    """
    True if the freelancer is available on the job's weekday and time of day.

    A job without a parseable date or time of day is compatible with anyone,
    as is a freelancer with no availability recorded at all (None). An
    availability without a days map, or without that weekday, is not.
    """
    if availability is None or not time_window:
        return True

    tw = _mapping(time_window)
    weekday = required_weekday(tw.get("date"))
    time_of_day = required_time_of_day(tw)
    if weekday is None or time_of_day is None:
        return True

    days = _mapping(availability).get("days")
    if not isinstance(days, Mapping):
        return False

    slots = days.get(weekday)
    if not isinstance(slots, (list, tuple)):
        return False
    return time_of_day in [str(s).lower() for s in slots]


def postcode_number(postcode: Any) -> Optional[int]:
    """Numeric part of a postcode: '1312AB' -> 1312. None when there is none."""
    if not isinstance(postcode, str):
        return None
    match = _POSTCODE_DIGITS.match(postcode.strip()[:4])
    return int(match.group()) if match else None


def check_location(
    freelancer_location: Any,
    job_location: Any,
    rules: Optional[CompatibilityRulesConfig] = None
) -> bool:
    """
    True if the job postcode lies within the freelancer's travel radius.

    nearby    -> postcode distance <= nearby_max_distance
    city      -> job postcode within the city's postcode range
    city_plus -> postcode distance <= city_plus_max_distance
    anything else, or a missing/invalid postcode on either side -> compatible
    """
    rules = rules or CompatibilityRulesConfig()
    if not freelancer_location or not job_location:
        return True

    job_number = postcode_number(_mapping(job_location).get("postcode"))
    freelancer_number = postcode_number(_mapping(freelancer_location).get("postcode"))
    if job_number is None or freelancer_number is None:
        return True

    distance = abs(job_number - freelancer_number)
    travel_radius = _mapping(freelancer_location).get("travel_radius")

    if travel_radius == "nearby":
        return distance <= rules.nearby_max_distance
    if travel_radius == "city":
        return rules.city_postcode_min <= job_number <= rules.city_postcode_max
    if travel_radius == "city_plus":
        return distance <= rules.city_plus_max_distance
    return True
