#!/usr/bin/env python3
"""
Match Explainer - one short sentence on why a freelancer fits a job.
"""
from typing import Optional
import logging

from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import MATCH_EXPLANATION_SYSTEM_PROMPT
from core.matcher.models import CandidateSnapshot, JobSnapshot

logger = logging.getLogger(__name__)


class MatchExplainer:
    """Best effort: a failed explanation never fails the ranking."""

    def __init__(self, ai_service: LLMProvider):
        self.ai = ai_service

    @staticmethod
    def build_prompt(job: JobSnapshot, candidate: CandidateSnapshot) -> str:
        return (
            f"Job description:\n{job.description}\n\n"
            f"Freelancer description:\n{candidate.description or ''}\n\n"
            f"Freelancer skills: {', '.join(candidate.skills or [])}\n\n"
            "Explain ONLY in 15 words why this freelancer is a good match."
        )

    def explain(self, job: JobSnapshot, candidate: CandidateSnapshot) -> Optional[str]:
        try:
            text = self.ai.generate_text(
                MATCH_EXPLANATION_SYSTEM_PROMPT,
                self.build_prompt(job, candidate)
            )
        except Exception as e:
            logger.warning(f"Explanation failed for freelancer {candidate.id}: {e}")
            return None
        return text.strip() if text and text.strip() else None
