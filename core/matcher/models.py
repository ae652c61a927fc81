#!/usr/bin/env python3
"""
Matcher Models - Data structures for ranking freelancers against a job.

Snapshots are plain copies of the ORM rows taken inside the unit of work,
so ranking and explanation run after the session has closed.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class JobSnapshot:
    id: Any
    description: str
    embedding: List[float]
    location: Dict[str, Any] = field(default_factory=dict)
    time_window: Dict[str, Any] = field(default_factory=dict)
    budget: Optional[str] = None


@dataclass
class CandidateSnapshot:
    id: Any
    embedding: List[float]
    description: Optional[str] = None
    headline: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    location: Dict[str, Any] = field(default_factory=dict)
    availability: Optional[Dict[str, Any]] = field(default_factory=dict)
    updated_at: Optional[datetime] = None


@dataclass
class ScoredCandidate:
    """A candidate with its similarity, compatibility flags and final score."""
    candidate: CandidateSnapshot
    similarity: float
    score: float
    has_availability_match: bool
    has_location_match: bool

    @property
    def is_compatible(self) -> bool:
        return self.has_availability_match and self.has_location_match


@dataclass
class MatchResult:
    """
    One ranked freelancer for a job.

    similarity is the raw cosine similarity; score adds the compatibility
    boosts and is what results are ordered by.
    """
    freelancer_profile_id: Any
    similarity: float
    score: float
    explanation: Optional[str] = None
    has_availability_match: bool = True
    has_location_match: bool = True
    headline: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    location: Dict[str, Any] = field(default_factory=dict)
