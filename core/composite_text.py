#!/usr/bin/env python3
"""
Composite Text Builder - canonical text for embedding jobs and freelancers.

Turns an entity's structured fields into one natural-language string:

    <description>. When: date: 2024-06-01, time: morning. Location: postcode 1312AB. Budget: 50 euro

The output is the only input to the embedding provider, so it has to be
deterministic: the same fields always give byte-identical text, clauses are
emitted only when they have content, and unknown keys are ignored.

Entities can be ORM rows, DTOs, namespaces or plain mappings.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional

from database.models import FreelancerProfile

CLAUSE_SEPARATOR = ". "

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
TIME_SLOTS = ["morning", "afternoon", "evening"]

TRAVEL_RADIUS_LABELS = {
    "nearby": "within 2 km",
    "city": "whole city of Almere",
    "city_plus": "city and surroundings",
}

FREELANCER_ONLY_FIELDS = ("skills", "example_tasks", "availability", "pricing_style", "hourly_rate")


def _field(entity: Any, name: str) -> Any:
    if entity is None:
        return None
    if isinstance(entity, Mapping):
        return entity.get(name)
    return getattr(entity, name, None)


def _text(value: Any) -> Optional[str]:
    """Stripped string form of value, or None when there is nothing to say."""
    if value is None or isinstance(value, (Mapping, list, tuple, set)):
        return None
    text = str(value).strip()
    return text or None


def _texts(values: Any) -> List[str]:
    if not isinstance(values, (list, tuple)):
        return []
    return [t for t in (_text(v) for v in values) if t]


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _clause(label: str, parts: Iterable[str], separator: str = ", ") -> Optional[str]:
    parts = list(parts)
    if not parts:
        return None
    return f"{label}: {separator.join(parts)}"


def _format_amount(value: Any) -> Optional[str]:
    text = _text(value)
    if text is None:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return text
    if amount == amount.to_integral_value():
        return str(int(amount))
    return str(amount.quantize(Decimal("0.01")))


def _time_window_clause(time_window: Any) -> Optional[str]:
    tw = _mapping(time_window)
    parts = []
    for key, prefix in (("date", "date"), ("start", "start"), ("end", "end"),
                        ("time", "time"), ("time_of_day", "time")):
        value = _text(tw.get(key))
        if value:
            parts.append(f"{prefix}: {value}")
    if tw.get("flexible") is True:
        parts.append("flexible timing")
    notes = _text(tw.get("notes"))
    if notes:
        parts.append(f"notes: {notes}")
    return _clause("When", parts)


def _location_clause(location: Any) -> Optional[str]:
    loc = _mapping(location)
    parts = []
    postcode = _text(loc.get("postcode"))
    if postcode:
        parts.append(f"postcode {postcode}")
    address = _text(loc.get("address"))
    if address:
        parts.append(address)
    radius = _text(loc.get("travel_radius"))
    if radius:
        parts.append(f"travels {TRAVEL_RADIUS_LABELS.get(radius, radius)}")
    return _clause("Location", parts)


def _ordered_slots(slots: Any) -> List[str]:
    """Known time slots in day order, then unknown ones as given, without repeats."""
    names = []
    for slot in _texts(slots):
        if slot not in names:
            names.append(slot)
    known = [s for s in TIME_SLOTS if s in names]
    return known + [s for s in names if s not in TIME_SLOTS]


def _availability_clause(availability: Any) -> Optional[str]:
    avail = _mapping(availability)
    days = _mapping(avail.get("days"))
    day_keys = [d for d in WEEKDAYS if d in days] + sorted(
        str(d) for d in days if d not in WEEKDAYS
    )

    parts = []
    for day in day_keys:
        slots = _ordered_slots(days.get(day))
        if slots:
            label = day.capitalize() if day in WEEKDAYS else day
            parts.append(f"{label} {', '.join(slots)}")
    if avail.get("short_notice") is True:
        parts.append("available on short notice")
    return _clause("Available", parts, separator="; ")


def _pricing_clause(pricing_style: Any, hourly_rate: Any) -> Optional[str]:
    style = _text(pricing_style)
    if style == "hourly":
        rate = _format_amount(hourly_rate)
        if rate:
            return f"Pricing: €{rate} per hour"
    elif style == "per_task":
        return "Pricing: per task"
    return None


def _join(clauses: Iterable[Optional[str]]) -> str:
    return CLAUSE_SEPARATOR.join(c for c in clauses if c)


def build_job_composite_text(job: Any) -> str:
    """
    Canonical text for a job request.

    Order: description, When, Location, Budget.
    """
    budget = _text(_field(job, "budget"))
    return _join([
        _text(_field(job, "description")),
        _time_window_clause(_field(job, "time_window")),
        _location_clause(_field(job, "location")),
        f"Budget: {budget}" if budget else None,
    ])


def build_freelancer_composite_text(profile: Any) -> str:
    """
    Canonical text for a freelancer profile.

    Order: description, Skills, Can help with, Available, Location, Pricing.
    """
    return _join([
        _text(_field(profile, "description")),
        _clause("Skills", _texts(_field(profile, "skills"))),
        _clause("Can help with", _texts(_field(profile, "example_tasks"))),
        _availability_clause(_field(profile, "availability")),
        _location_clause(_field(profile, "location")),
        _pricing_clause(_field(profile, "pricing_style"), _field(profile, "hourly_rate")),
    ])


def is_freelancer_entity(entity: Any) -> bool:
    if isinstance(entity, FreelancerProfile):
        return True
    return any(_field(entity, name) is not None for name in FREELANCER_ONLY_FIELDS)


def build_composite_text(entity: Any) -> str:
    """Build the composite text for a job request or a freelancer profile."""
    if is_freelancer_entity(entity):
        return build_freelancer_composite_text(entity)
    return build_job_composite_text(entity)
