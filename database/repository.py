from sqlalchemy.orm import Session

from database.repositories import JobRequestRepository, FreelancerProfileRepository


class MarketplaceRepository:
    """Facade over the per-aggregate repositories sharing one Session.

    Transactions are owned by marketplace_uow(); repositories only flush.
    """

    def __init__(self, db: Session):
        self.db = db
        self.jobs = JobRequestRepository(db)
        self.freelancers = FreelancerProfileRepository(db)
