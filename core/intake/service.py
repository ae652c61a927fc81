#!/usr/bin/env python3
"""
Intake Service - conversational job intake.

Each user turn is appended to the transcript, the full transcript is run
through structured extraction, and the result is merged into the job data
collected so far. The phase follows from the merged data. Replies are
streamed with the instruction set of the current phase.
"""
from typing import Any, Dict, Iterator, Optional
import logging

from core.config_loader import IntakeConfig
from core.exceptions import ValidationError
from core.intake.merger import merge_extracted
from core.intake.models import ChatMessage, ConversationPhase, ConversationState, JobData
from core.intake.phases import (
    build_conversation_context,
    detect_phase,
    get_system_prompt_for_phase,
    next_phase,
)
from core.job_service import CreateJobRequestParams
from core.llm.interfaces import LLMProvider
from core.llm.schema_models import JOB_DATA_EXTRACTION_SCHEMA
from core.llm.system_prompts import JOB_DATA_EXTRACTION_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class IntakeService:
    """
    Drives one intake conversation per ConversationState.

    States are treated as values: every operation returns a new state and
    leaves its input untouched.
    """

    def __init__(self, ai_service: LLMProvider, config: Optional[IntakeConfig] = None):
        self.ai = ai_service
        self.config = config or IntakeConfig()

    def extract_job_data(self, conversation: str, current: Optional[JobData] = None) -> JobData:
        """
        Extract job fields from the transcript and merge them into current.

        Raises:
            ValidationError: If the transcript is empty
            UpstreamModelError: If the extraction call fails
        """
        if not conversation or not conversation.strip():
            raise ValidationError("Conversation is empty")

        extracted = self.ai.extract_structured_data(
            conversation,
            JOB_DATA_EXTRACTION_SCHEMA,
            system_prompt=JOB_DATA_EXTRACTION_SYSTEM_PROMPT,
            user_message=f"Extract job data from this conversation:\n\n{conversation}"
        )
        merged = merge_extracted(current, extracted)
        logger.debug(f"Extracted job data fields: {sorted(merged.to_dict().keys())}")
        return merged

    def process_user_message(self, state: ConversationState, content: str) -> ConversationState:
        """Record a user turn, re-extract job data and advance the phase."""
        if state.phase == ConversationPhase.COMPLETE:
            raise ValidationError("Conversation is already complete")
        if not content or not content.strip():
            raise ValidationError("Message content is required")

        messages = list(state.messages) + [ChatMessage(role='user', content=content.strip())]
        job_data = self.extract_job_data(build_conversation_context(messages), state.job_data)
        phase = detect_phase(job_data)

        if phase != state.phase:
            logger.info(f"Intake phase {state.phase.value} -> {phase.value}")

        return ConversationState(phase=phase, job_data=job_data, messages=messages)

    def record_assistant_message(self, state: ConversationState, content: str) -> ConversationState:
        """Append the assistant's (fully streamed) reply to the transcript."""
        messages = list(state.messages) + [ChatMessage(role='assistant', content=content)]
        return state.model_copy(update={'messages': messages})

    def stream_reply(self, state: ConversationState) -> Iterator[str]:
        """Stream the assistant reply for the current phase, chunk by chunk."""
        system = get_system_prompt_for_phase(next_phase(state))
        return self.ai.stream_text(system, [msg.model_dump() for msg in state.messages])

    def confirm(self, state: ConversationState) -> ConversationState:
        """
        Mark the intake complete after the user confirmed the summary.

        Raises:
            ValidationError: If there is no description or the conversation
                has not reached the confirmation phase
        """
        if not (state.job_data.description and state.job_data.description.strip()):
            raise ValidationError("Job description is required")

        phase = next_phase(state)
        if phase == ConversationPhase.COMPLETE:
            return state
        if phase != ConversationPhase.CONFIRMATION:
            raise ValidationError(f"Cannot confirm a conversation in phase '{phase.value}'")

        logger.info("Intake confirmed")
        return state.model_copy(update={'phase': ConversationPhase.COMPLETE})

    def to_job_request_params(
        self,
        job_data: JobData,
        client_profile_id: Optional[Any] = None
    ) -> CreateJobRequestParams:
        """Convert finalized job data into job creation parameters."""
        if not (job_data.description and job_data.description.strip()):
            raise ValidationError("Job description is required")

        location: Dict[str, Any] = {'city': self.config.default_city}
        if job_data.location:
            location.update(job_data.location.model_dump(exclude_none=True))

        time_window = job_data.time_window.model_dump(exclude_none=True) if job_data.time_window else None

        return CreateJobRequestParams(
            client_profile_id=client_profile_id,
            description=job_data.description.strip(),
            location=location,
            time_window=time_window or None,
            budget=job_data.budget,
        )
