import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Index
from sqlalchemy.sql import text as sql_text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from pgvector.sqlalchemy import Vector

from .base import Base, EMBEDDING_DIMENSIONS


class JobRequest(Base):
    """
    A client's request for help with a task.

    Inserted with a null embedding, then updated once the embedding of its
    composite text has been computed. Readers may observe the row in between.
    """
    __tablename__ = 'job_request'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_profile_id = Column(UUID(as_uuid=True), nullable=True)

    description = Column(Text, nullable=False)
    location = Column(JSONB, nullable=False, default=dict)  # city, postcode, address, travel_radius
    time_window = Column(JSONB, nullable=False, default=dict)  # date, start, end, time, time_of_day, flexible, notes
    budget = Column(Text)

    embedding = Column(Vector(EMBEDDING_DIMENSIONS))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"), onupdate=sql_text("timezone('UTC', now())"))

    __table_args__ = (
        Index('idx_job_request_client', 'client_profile_id'),
        Index('idx_job_request_created', 'created_at'),
    )
