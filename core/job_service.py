#!/usr/bin/env python3
"""
Job Request Service - create and read client job requests.

Creation is two units of work: the row is inserted with a null embedding,
then the embedding of its composite text is computed and stored. Between
the two the job exists but is not matchable yet. If embedding fails the
job stays without one until the next backfill.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional
import logging

from core.embedding_service import KIND_JOB, EmbeddingService
from core.exceptions import JobNotFoundException, ValidationError
from core.utils import parse_uuid
from database.models import JobRequest
from database.uow import marketplace_uow

logger = logging.getLogger(__name__)


@dataclass
class CreateJobRequestParams:
    description: str
    client_profile_id: Optional[Any] = None
    location: Optional[Dict[str, Any]] = None
    time_window: Optional[Dict[str, Any]] = None
    budget: Optional[str] = None


@dataclass
class JobRequestDTO:
    """Job request data detached from the session."""
    id: Any
    description: str
    client_profile_id: Optional[Any] = None
    location: Dict[str, Any] = field(default_factory=dict)
    time_window: Dict[str, Any] = field(default_factory=dict)
    budget: Optional[str] = None
    has_embedding: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_orm(cls, job: JobRequest) -> "JobRequestDTO":
        return cls(
            id=job.id,
            description=job.description,
            client_profile_id=job.client_profile_id,
            location=dict(job.location or {}),
            time_window=dict(job.time_window or {}),
            budget=job.budget,
            has_embedding=job.embedding is not None,
            created_at=job.created_at,
        )


def _populated(value: Optional[Mapping[str, Any]], name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(f"{name} must be an object")
    return {key: item for key, item in value.items() if item is not None}


class JobRequestService:

    def __init__(self, embedding_service: EmbeddingService, uow_factory: Callable = marketplace_uow):
        self.embeddings = embedding_service
        self.uow_factory = uow_factory

    def create_job_request(self, params: CreateJobRequestParams) -> JobRequestDTO:
        """
        Create a job request and compute its embedding.

        Raises:
            ValidationError: Blank description or malformed location/time window
            UpstreamModelError: Embedding failed; the job was created without one
        """
        description = (params.description or "").strip()
        if not description:
            raise ValidationError("Job description is required")

        location = _populated(params.location, "location")
        time_window = _populated(params.time_window, "time_window")
        budget = (params.budget or "").strip() or None

        with self.uow_factory() as repo:
            job = repo.jobs.create_job_request(
                description=description,
                location=location,
                time_window=time_window,
                budget=budget,
                client_profile_id=params.client_profile_id
            )
            job_id = job.id

        logger.info(f"Created job request {job_id}")
        self.embeddings.compute_and_store_embedding(job_id, KIND_JOB)

        return self.get_job_request(job_id)

    def get_job_request(self, job_id: Any) -> JobRequestDTO:
        job_uuid = parse_uuid(job_id)
        if job_uuid is None:
            raise JobNotFoundException(f"Job request {job_id} not found")

        with self.uow_factory() as repo:
            job = repo.jobs.get_by_id(job_uuid)
            if job is None:
                raise JobNotFoundException(f"Job request {job_id} not found")
            return JobRequestDTO.from_orm(job)

    def list_client_job_requests(self, client_profile_id: Any) -> List[JobRequestDTO]:
        """All job requests of one client, newest first."""
        with self.uow_factory() as repo:
            return [JobRequestDTO.from_orm(job) for job in repo.jobs.list_for_client(client_profile_id)]
