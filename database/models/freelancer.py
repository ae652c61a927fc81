import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Boolean, Numeric, Index
from sqlalchemy.sql import text as sql_text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from pgvector.sqlalchemy import Vector

from .base import Base, EMBEDDING_DIMENSIONS


class FreelancerProfile(Base):
    """
    A freelancer's public profile.

    The embedding is always built from the profile's current composite text;
    content_hash records which text that was so unchanged upserts can skip
    re-embedding.
    """
    __tablename__ = 'freelancer_profile'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    profile_id = Column(UUID(as_uuid=True), nullable=False, unique=True)  # Owning account

    description = Column(Text, nullable=False)
    headline = Column(Text)
    skills = Column(JSONB, nullable=False, default=list)
    example_tasks = Column(JSONB, nullable=False, default=list)

    availability = Column(JSONB, nullable=False, default=dict)  # {"days": {"monday": ["morning"]}, "short_notice": bool}
    location = Column(JSONB, nullable=False, default=dict)  # postcode, address, city, travel_radius

    pricing_style = Column(Text)  # hourly|per_task
    hourly_rate = Column(Numeric)
    is_active = Column(Boolean, nullable=False, default=True)

    content_hash = Column(Text)
    embedding = Column(Vector(EMBEDDING_DIMENSIONS))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"), onupdate=sql_text("timezone('UTC', now())"))

    __table_args__ = (
        Index('idx_freelancer_profile_active', 'is_active'),
        # HNSW index for vector similarity search on embedding
        Index('idx_freelancer_profile_embedding_hnsw', 'embedding', postgresql_using='hnsw', postgresql_with={'m': 16, 'ef_construction': 64}, postgresql_ops={'embedding': 'vector_cosine_ops'}),
    )
