import logging
from typing import List, Optional, Dict, Any

from sqlalchemy import select, or_

from database.models import FreelancerProfile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class FreelancerProfileRepository(BaseRepository):
    def get_by_id(self, freelancer_id: Any) -> Optional[FreelancerProfile]:
        return self._get_by_pk(FreelancerProfile, freelancer_id)

    def get_by_profile_id(self, profile_id: Any) -> Optional[FreelancerProfile]:
        stmt = select(FreelancerProfile).where(FreelancerProfile.profile_id == profile_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def upsert_profile(self, profile_id: Any, fields: Dict[str, Any]) -> FreelancerProfile:
        """
        Create or update the profile owned by profile_id.

        Only keys present in fields are written; absent keys keep their
        stored value.
        """
        profile = self.get_by_profile_id(profile_id)
        if profile is None:
            profile = FreelancerProfile(profile_id=profile_id)
            self.db.add(profile)
            logger.debug(f"Creating freelancer profile for {profile_id}")

        for key, value in fields.items():
            setattr(profile, key, value)

        self.db.flush()
        return profile

    def save_embedding(self, profile: FreelancerProfile, embedding: List[float], content_hash: str) -> None:
        profile.embedding = embedding
        profile.content_hash = content_hash

    def get_ids_for_embedding(self) -> List[Any]:
        """Ids of every profile that has a description to embed."""
        stmt = select(FreelancerProfile.id).where(
            FreelancerProfile.description != None
        ).order_by(FreelancerProfile.created_at, FreelancerProfile.id)
        return list(self.db.execute(stmt).scalars().all())

    def get_match_candidates(
        self,
        query_embedding: List[float],
        limit: int,
        postcode_prefixes: Optional[List[str]] = None
    ) -> List[FreelancerProfile]:
        """
        Retrieve candidate profiles for a job using vector similarity.

        Only active profiles with a non-null embedding are returned: a profile
        that is mid-creation has no embedding yet and is skipped.

        Args:
            query_embedding: The job embedding to compare against
            limit: Maximum number of profiles to return
            postcode_prefixes: Optional service-area filter; profiles without
                a postcode are kept

        Returns:
            Profiles ordered by cosine distance ascending (most similar first)
        """
        stmt = select(FreelancerProfile).where(
            FreelancerProfile.is_active == True,
            FreelancerProfile.embedding != None
        )

        if postcode_prefixes:
            postcode = FreelancerProfile.location['postcode'].astext
            stmt = stmt.where(or_(
                postcode.is_(None),
                *[postcode.like(f"{prefix}%") for prefix in postcode_prefixes]
            ))

        stmt = stmt.order_by(
            FreelancerProfile.embedding.cosine_distance(query_embedding),
            FreelancerProfile.updated_at.desc(),
            FreelancerProfile.id
        ).limit(limit)

        return self.db.execute(stmt).scalars().all()
