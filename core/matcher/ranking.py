#!/usr/bin/env python3
"""
Ranking - score and order candidate freelancers for one job.

Pure functions over snapshots; no database or provider access.

    score = similarity
          + availability_boost  (if available on the job's day and time)
          + location_boost      (if the job is within travel radius)

Ties break on similarity, then the most recently updated profile, then id.
"""
from typing import List, Optional, Tuple

from core.config_loader import MatchingConfig
from core.matcher.compatibility import check_availability, check_location
from core.matcher.models import CandidateSnapshot, JobSnapshot, ScoredCandidate
from core.matcher.similarity import SimilarityCalculator


def score_candidate(
    job: JobSnapshot,
    candidate: CandidateSnapshot,
    config: MatchingConfig
) -> ScoredCandidate:
    similarity = SimilarityCalculator.calculate(job.embedding, candidate.embedding)
    has_availability = check_availability(candidate.availability, job.time_window)
    has_location = check_location(candidate.location, job.location, config.rules)

    score = similarity
    if has_availability:
        score += config.weights.availability_boost
    if has_location:
        score += config.weights.location_boost

    return ScoredCandidate(
        candidate=candidate,
        similarity=similarity,
        score=score,
        has_availability_match=has_availability,
        has_location_match=has_location,
    )


def _sort_key(scored: ScoredCandidate) -> Tuple[float, float, float, str]:
    updated_at = scored.candidate.updated_at
    recency = updated_at.timestamp() if updated_at else 0.0
    return (-scored.score, -scored.similarity, -recency, str(scored.candidate.id))


def rank_candidates(
    job: JobSnapshot,
    candidates: List[CandidateSnapshot],
    config: MatchingConfig,
    top_k: Optional[int] = None
) -> List[ScoredCandidate]:
    """
    Score, filter and order candidates, keeping at most top_k.

    Candidates under min_similarity are dropped. Structural mismatches are
    dropped too unless exclude_structural_mismatches is off, in which case
    they just miss the boost.
    """
    top_k = config.top_k if top_k is None else top_k
    if top_k <= 0:
        return []

    ranked = []
    for candidate in candidates:
        scored = score_candidate(job, candidate, config)
        if scored.similarity < config.min_similarity:
            continue
        if config.exclude_structural_mismatches and not scored.is_compatible:
            continue
        ranked.append(scored)

    ranked.sort(key=_sort_key)
    return ranked[:top_k]
