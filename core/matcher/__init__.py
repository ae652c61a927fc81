"""Matcher Module - rank freelancers for a job by embedding similarity."""
from core.matcher.models import JobSnapshot, CandidateSnapshot, ScoredCandidate, MatchResult
from core.matcher.similarity import SimilarityCalculator
from core.matcher.compatibility import check_availability, check_location
from core.matcher.ranking import rank_candidates, score_candidate
from core.matcher.explainer import MatchExplainer
from core.matcher.service import MatchingService

__all__ = [
    'MatchingService', 'MatchExplainer', 'SimilarityCalculator',
    'check_availability', 'check_location', 'rank_candidates', 'score_candidate',
    'JobSnapshot', 'CandidateSnapshot', 'ScoredCandidate', 'MatchResult',
]
