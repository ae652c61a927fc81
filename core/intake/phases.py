#!/usr/bin/env python3
"""
Conversation phases for the job intake.

The phase is derived from the accumulated job data on every turn; nothing
about it is stored except the terminal COMPLETE, which only an explicit
user confirmation can set.

    understanding -> logistics -> confirmation -> complete

A turn that supplies the task, city and date at once goes straight from
understanding to confirmation.
"""
from typing import Any, Iterable, Mapping, Union

from core.intake.models import ChatMessage, ConversationPhase, ConversationState, JobData
from core.llm.system_prompts import (
    UNDERSTANDING_PHASE_PROMPT,
    LOGISTICS_PHASE_PROMPT,
    CONFIRMATION_PHASE_PROMPT,
)

PHASE_PROMPTS = {
    ConversationPhase.UNDERSTANDING: UNDERSTANDING_PHASE_PROMPT,
    ConversationPhase.LOGISTICS: LOGISTICS_PHASE_PROMPT,
    ConversationPhase.CONFIRMATION: CONFIRMATION_PHASE_PROMPT,
    ConversationPhase.COMPLETE: CONFIRMATION_PHASE_PROMPT,
}


def as_job_data(job_data: Union[JobData, Mapping[str, Any], None]) -> JobData:
    if job_data is None:
        return JobData()
    if isinstance(job_data, JobData):
        return job_data
    return JobData.from_input(dict(job_data))


def detect_phase(job_data: Union[JobData, Mapping[str, Any], None]) -> ConversationPhase:
    """Detect the intake phase from the job data collected so far."""
    data = as_job_data(job_data)

    if not (data.description or data.details):
        return ConversationPhase.UNDERSTANDING

    has_city = bool(data.location and data.location.city)
    has_date = bool(data.time_window and data.time_window.date)
    if has_city and has_date:
        return ConversationPhase.CONFIRMATION
    return ConversationPhase.LOGISTICS


def next_phase(state: ConversationState) -> ConversationPhase:
    """COMPLETE is terminal; every other phase is re-derived from the data."""
    if state.phase == ConversationPhase.COMPLETE:
        return ConversationPhase.COMPLETE
    return detect_phase(state.job_data)


def get_system_prompt_for_phase(phase: ConversationPhase) -> str:
    return PHASE_PROMPTS[ConversationPhase(phase)]


def build_conversation_context(messages: Iterable[ChatMessage]) -> str:
    """Render the transcript as 'User: ...' / 'Assistant: ...' blocks."""
    return "\n\n".join(
        f"{'User' if msg.role == 'user' else 'Assistant'}: {msg.content}"
        for msg in messages
    )
