from core.intake.models import (
    JobData, JobLocation, JobTimeWindow, ConversationPhase, ChatMessage, ConversationState
)
from core.intake.phases import (
    detect_phase, next_phase, get_system_prompt_for_phase, build_conversation_context
)
from core.intake.merger import clean_nulls, merge_extracted
from core.intake.service import IntakeService

__all__ = [
    'JobData', 'JobLocation', 'JobTimeWindow', 'ConversationPhase', 'ChatMessage', 'ConversationState',
    'detect_phase', 'next_phase', 'get_system_prompt_for_phase', 'build_conversation_context',
    'clean_nulls', 'merge_extracted', 'IntakeService',
]
