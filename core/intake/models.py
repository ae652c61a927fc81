#!/usr/bin/env python3
"""
Intake Models - Job data accumulated during a conversational intake.

Field names are snake_case; camelCase spellings (timeWindow, timeOfDay,
estimatedDuration) are accepted on input. Unknown keys are ignored.
Numbers are accepted where text is expected ("budget": 50 becomes "50").
"""
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError
from pydantic.alias_generators import to_camel

from core.exceptions import ValidationError


class _IntakeModel(BaseModel):
    model_config = ConfigDict(
        extra='ignore',
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class JobLocation(_IntakeModel):
    city: Optional[str] = None
    postcode: Optional[str] = None
    address: Optional[str] = None


class JobTimeWindow(_IntakeModel):
    date: Optional[str] = None
    time: Optional[str] = None
    time_of_day: Optional[str] = None
    notes: Optional[str] = None


class JobData(_IntakeModel):
    """Partially-populated job request, built up turn by turn."""
    description: Optional[str] = None
    details: Optional[str] = None
    location: Optional[JobLocation] = None
    time_window: Optional[JobTimeWindow] = None
    budget: Optional[str] = None
    estimated_duration: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Populated fields only; nested groups with nothing populated are left out."""
        data = self.model_dump(exclude_none=True)
        return {key: value for key, value in data.items() if value != {}}

    @classmethod
    def from_input(cls, data: Any) -> "JobData":
        """Validate caller or model supplied data, raising the service ValidationError."""
        try:
            return cls.model_validate(data)
        except SchemaError as e:
            raise ValidationError(f"Invalid job data: {e}") from e


class ConversationPhase(str, Enum):
    UNDERSTANDING = "understanding"
    LOGISTICS = "logistics"
    CONFIRMATION = "confirmation"
    COMPLETE = "complete"


class ChatMessage(BaseModel):
    role: Literal['user', 'assistant']
    content: str


class ConversationState(BaseModel):
    """State of one intake session. Ends when phase reaches COMPLETE."""
    phase: ConversationPhase = ConversationPhase.UNDERSTANDING
    job_data: JobData = Field(default_factory=JobData)
    messages: List[ChatMessage] = Field(default_factory=list)
