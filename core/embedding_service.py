#!/usr/bin/env python3
"""
Embedding Service - compute and persist embeddings for jobs and freelancers.

An embedding is always computed from the entity's current composite text.
The record is read in one unit of work and the embedding written in another,
with the provider call in between; a provider failure writes nothing.
"""
from dataclasses import dataclass
from typing import Any, Callable, List, Optional
import logging

from core.composite_text import build_freelancer_composite_text, build_job_composite_text
from core.exceptions import (
    FreelancerProfileNotFoundException,
    JobNotFoundException,
    ValidationError,
)
from core.llm.interfaces import LLMProvider
from core.utils import ContentFingerprinter, parse_uuid
from database.uow import marketplace_uow

logger = logging.getLogger(__name__)

KIND_JOB = "job"
KIND_FREELANCER = "freelancer"
ENTITY_KINDS = (KIND_JOB, KIND_FREELANCER)


@dataclass
class BackfillResult:
    """Outcome of re-embedding one record during a backfill."""
    entity_id: Any
    success: bool
    error: Optional[str] = None


class EmbeddingService:
    """Computes composite-text embeddings and stores them on their records."""

    def __init__(self, ai_service: LLMProvider, uow_factory: Callable = marketplace_uow):
        self.ai = ai_service
        self.uow_factory = uow_factory

    def compute_and_store_embedding(self, entity_id: Any, kind: str) -> None:
        """
        Recompute the embedding of one job request or freelancer profile.

        Args:
            entity_id: Id of the record
            kind: 'job' or 'freelancer'

        Raises:
            ValidationError: Unknown kind, or the record has a blank description
            JobNotFoundException / FreelancerProfileNotFoundException: Unknown id
            UpstreamModelError: The embedding provider failed
        """
        if kind not in ENTITY_KINDS:
            raise ValidationError(f"Unknown entity kind '{kind}', expected one of {ENTITY_KINDS}")

        not_found = JobNotFoundException if kind == KIND_JOB else FreelancerProfileNotFoundException
        entity_uuid = parse_uuid(entity_id)
        if entity_uuid is None:
            raise not_found(f"{kind} {entity_id} not found")

        with self.uow_factory() as repo:
            entity = self._get(repo, kind, entity_uuid)
            if entity is None:
                raise not_found(f"{kind} {entity_id} not found")
            if not (entity.description or "").strip():
                raise ValidationError(f"{kind} {entity_id} has no description to embed")
            if kind == KIND_JOB:
                text = build_job_composite_text(entity)
            else:
                text = build_freelancer_composite_text(entity)

        # No unit of work is held open across the provider call
        embedding = self.ai.generate_embedding(text)

        with self.uow_factory() as repo:
            entity = self._get(repo, kind, entity_uuid)
            if entity is None:
                raise not_found(f"{kind} {entity_id} was deleted while embedding")
            if kind == KIND_JOB:
                repo.jobs.save_embedding(entity, embedding)
            else:
                repo.freelancers.save_embedding(entity, embedding, ContentFingerprinter.calculate(text))

        logger.debug(f"Stored embedding for {kind} {entity_id} ({len(text)} chars of composite text)")

    @staticmethod
    def _get(repo, kind: str, entity_uuid: Any):
        if kind == KIND_JOB:
            return repo.jobs.get_by_id(entity_uuid)
        return repo.freelancers.get_by_id(entity_uuid)

    def backfill_job_embeddings(self) -> List[BackfillResult]:
        """Recompute embeddings for every job request. Never stops on a single failure."""
        with self.uow_factory() as repo:
            ids = repo.jobs.get_ids_for_embedding()
        return self._backfill(ids, KIND_JOB)

    def backfill_freelancer_embeddings(self) -> List[BackfillResult]:
        """Recompute embeddings for every freelancer profile. Never stops on a single failure."""
        with self.uow_factory() as repo:
            ids = repo.freelancers.get_ids_for_embedding()
        return self._backfill(ids, KIND_FREELANCER)

    def _backfill(self, ids: List[Any], kind: str) -> List[BackfillResult]:
        logger.info(f"Backfilling embeddings for {len(ids)} {kind} records")

        results = []
        for entity_id in ids:
            try:
                self.compute_and_store_embedding(entity_id, kind)
                results.append(BackfillResult(entity_id=entity_id, success=True))
            except Exception as e:
                logger.error(f"Failed to embed {kind} {entity_id}: {e}")
                results.append(BackfillResult(entity_id=entity_id, success=False, error=str(e)))

        failed = sum(1 for r in results if not r.success)
        logger.info(f"Backfill of {kind} embeddings done: {len(results) - failed} succeeded, {failed} failed")
        return results
