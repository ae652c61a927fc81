#!/usr/bin/env python3
"""
Matching Service - rank freelancers for a job request.

1. Load the job and its embedding (fail fast when it has none yet)
2. Retrieve a candidate pool by vector similarity (top_k * multiplier)
3. Score, filter and order the pool (see core.matcher.ranking)
4. Explain the top results, best effort

All reads happen in one unit of work; ranking and explanations run on
snapshots after the session has closed.
"""
from typing import Any, Callable, List, Optional
import logging

from core.config_loader import MatchingConfig
from core.exceptions import EmbeddingNotReadyError, JobNotFoundException
from core.llm.interfaces import LLMProvider
from core.matcher.explainer import MatchExplainer
from core.matcher.models import CandidateSnapshot, JobSnapshot, MatchResult, ScoredCandidate
from core.matcher.ranking import rank_candidates
from core.utils import parse_uuid
from database.models import FreelancerProfile, JobRequest
from database.uow import marketplace_uow

logger = logging.getLogger(__name__)


def _vector(embedding: Any) -> List[float]:
    return [float(v) for v in embedding]


def job_snapshot(job: JobRequest) -> JobSnapshot:
    return JobSnapshot(
        id=job.id,
        description=job.description,
        embedding=_vector(job.embedding),
        location=dict(job.location or {}),
        time_window=dict(job.time_window or {}),
        budget=job.budget,
    )


def candidate_snapshot(profile: FreelancerProfile) -> CandidateSnapshot:
    return CandidateSnapshot(
        id=profile.id,
        embedding=_vector(profile.embedding),
        description=profile.description,
        headline=profile.headline,
        skills=list(profile.skills or []),
        location=dict(profile.location or {}),
        # None means "nothing recorded" to the availability check; keep it
        availability=dict(profile.availability) if profile.availability is not None else None,
        updated_at=profile.updated_at,
    )


class MatchingService:
    """
    Service for ranking freelancer profiles against a job request.

    Similarity is the primary signal; availability and location only add
    boosts (or exclude candidates, depending on configuration).
    """

    def __init__(
        self,
        ai_service: LLMProvider,
        config: Optional[MatchingConfig] = None,
        uow_factory: Callable = marketplace_uow
    ):
        """
        Initialize matching service with dependencies.

        Args:
            ai_service: LLMProvider used for match explanations
            config: MatchingConfig with ranking parameters
            uow_factory: Context manager factory yielding a MarketplaceRepository
        """
        self.ai = ai_service
        self.config = config or MatchingConfig()
        self.uow_factory = uow_factory
        self.explainer = MatchExplainer(ai_service)

    def rank_matches(self, job_id: Any, top_k: Optional[int] = None) -> List[MatchResult]:
        """
        Rank freelancers for a job.

        Args:
            job_id: Id of the job request
            top_k: Maximum number of results; defaults to config.top_k

        Returns:
            Up to top_k MatchResults, best first. Empty when nobody qualifies.

        Raises:
            JobNotFoundException: If the job does not exist
            EmbeddingNotReadyError: If the job's embedding is not computed yet
        """
        top_k = self.config.top_k if top_k is None else top_k
        if top_k <= 0:
            return []

        job_uuid = parse_uuid(job_id)
        if job_uuid is None:
            raise JobNotFoundException(f"Job request {job_id} not found")

        with self.uow_factory() as repo:
            job = repo.jobs.get_by_id(job_uuid)
            if job is None:
                raise JobNotFoundException(f"Job request {job_id} not found")
            if job.embedding is None:
                raise EmbeddingNotReadyError(f"Job request {job_id} has no embedding yet")

            job_snap = job_snapshot(job)
            rows = repo.freelancers.get_match_candidates(
                query_embedding=job_snap.embedding,
                limit=top_k * self.config.candidate_pool_multiplier,
                postcode_prefixes=self.config.service_area_postcode_prefixes or None
            )
            candidates = [candidate_snapshot(row) for row in rows]

        if not candidates:
            logger.info(f"No candidates with embeddings for job {job_id}")
            return []

        ranked = rank_candidates(job_snap, candidates, self.config, top_k)
        logger.info(f"Ranked {len(ranked)} of {len(candidates)} candidates for job {job_id}")

        return self._build_results(job_snap, ranked)

    def _build_results(self, job: JobSnapshot, ranked: List[ScoredCandidate]) -> List[MatchResult]:
        explain_n = len(ranked)
        if not self.config.explanations_enabled:
            explain_n = 0
        elif self.config.explain_top_n is not None:
            explain_n = min(explain_n, self.config.explain_top_n)

        results = []
        for position, scored in enumerate(ranked):
            candidate = scored.candidate
            explanation = self.explainer.explain(job, candidate) if position < explain_n else None
            results.append(MatchResult(
                freelancer_profile_id=candidate.id,
                similarity=scored.similarity,
                score=scored.score,
                explanation=explanation,
                has_availability_match=scored.has_availability_match,
                has_location_match=scored.has_location_match,
                headline=candidate.headline,
                skills=candidate.skills,
                location=candidate.location,
            ))
        return results
