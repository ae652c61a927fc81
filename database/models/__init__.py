from .base import Base, EMBEDDING_DIMENSIONS
from .job_request import JobRequest
from .freelancer import FreelancerProfile

__all__ = [
    'Base',
    'EMBEDDING_DIMENSIONS',
    'JobRequest',
    'FreelancerProfile',
]
