from database.repositories.base import BaseRepository
from database.repositories.job_request import JobRequestRepository
from database.repositories.freelancer import FreelancerProfileRepository

__all__ = [
    'BaseRepository',
    'JobRequestRepository',
    'FreelancerProfileRepository',
]
