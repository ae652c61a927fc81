from typing import List, Optional, Dict, Any

from sqlalchemy import select

from database.models import JobRequest
from database.repositories.base import BaseRepository


class JobRequestRepository(BaseRepository):
    def get_by_id(self, job_id: Any) -> Optional[JobRequest]:
        return self._get_by_pk(JobRequest, job_id)

    def create_job_request(
        self,
        description: str,
        location: Optional[Dict[str, Any]] = None,
        time_window: Optional[Dict[str, Any]] = None,
        budget: Optional[str] = None,
        client_profile_id: Optional[Any] = None
    ) -> JobRequest:
        """Insert a job request without an embedding."""
        job = JobRequest(
            client_profile_id=client_profile_id,
            description=description,
            location=location or {},
            time_window=time_window or {},
            budget=budget,
            embedding=None
        )
        self.db.add(job)
        self.db.flush()  # Generate ID
        return job

    def save_embedding(self, job: JobRequest, embedding: List[float]) -> None:
        job.embedding = embedding

    def list_for_client(self, client_profile_id: Any) -> List[JobRequest]:
        stmt = select(JobRequest).where(
            JobRequest.client_profile_id == client_profile_id
        ).order_by(JobRequest.created_at.desc(), JobRequest.id)
        return self.db.execute(stmt).scalars().all()

    def get_ids_for_embedding(self) -> List[Any]:
        """Ids of every job request that has a description to embed."""
        stmt = select(JobRequest.id).where(
            JobRequest.description != None
        ).order_by(JobRequest.created_at, JobRequest.id)
        return list(self.db.execute(stmt).scalars().all())
