#!/usr/bin/env python3
"""
Extraction Merger - fold one turn's extracted fields into the job data.

Rules:
- null means "not mentioned this turn" and never erases a known value
- nested objects are cleaned recursively and dropped when nothing is left
- scalars present in the extraction replace the previous value
- location and time_window are merged key by key, so a later turn that only
  mentions a postcode keeps the address captured earlier
"""
from typing import Any, Dict, Mapping, Union

from core.intake.models import JobData

NESTED_GROUPS = ("location", "time_window")


def clean_nulls(value: Any) -> Any:
    """Drop None values recursively; nested mappings left empty are dropped too."""
    if not isinstance(value, Mapping):
        return value

    cleaned = {}
    for key, item in value.items():
        if item is None:
            continue
        if isinstance(item, Mapping):
            nested = clean_nulls(item)
            if nested:
                cleaned[key] = nested
        else:
            cleaned[key] = item
    return cleaned


def _normalized(data: Union[JobData, Mapping[str, Any], None]) -> Dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, JobData):
        return data.to_dict()
    return JobData.from_input(clean_nulls(data)).to_dict()


def merge_extracted(
    existing: Union[JobData, Mapping[str, Any], None],
    extracted: Union[JobData, Mapping[str, Any], None]
) -> JobData:
    """
    Merge freshly extracted fields into the accumulated job data.

    Args:
        existing: Job data accumulated so far
        extracted: This turn's extraction; any field may be null

    Returns:
        New JobData; neither input is modified

    Raises:
        ValidationError: A field has a value that cannot be read as job data
    """
    current = _normalized(existing)
    fresh = _normalized(extracted)

    merged = dict(current)
    merged.update({key: value for key, value in fresh.items() if key not in NESTED_GROUPS})

    for group in NESTED_GROUPS:
        combined = {**current.get(group, {}), **fresh.get(group, {})}
        if combined:
            merged[group] = combined
        else:
            merged.pop(group, None)

    return JobData.from_input(merged)
