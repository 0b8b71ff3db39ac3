# jobboard/models.py
from __future__ import annotations

import uuid

from sqlalchemy import Column, String, Text, DateTime, Index, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.mutable import MutableList

from jobboard.database import Base
from jobboard.services.normalize import utcnow

# JSONB on Postgres (enables the ?| overlap operator), plain JSON elsewhere (e.g., SQLite)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


# =======================
# Job model
# =======================
class Job(Base):
    __tablename__ = "job"

    id = Column(String(36), primary_key=True, default=_new_id)

    title = Column(String(200), nullable=False, index=True)
    company_name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)

    # Ordered list of tags, e.g. ["Full-time", "Remote"]
    job_type = Column(MutableList.as_mutable(JSONType), nullable=False, default=list)

    # Ownership (subject of the auth service token, not a local FK)
    user_id = Column(String(64), nullable=True, index=True)

    # Set application-side: microsecond precision on every backend
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Listing order is (created_at desc, id desc)
    __table_args__ = (
        Index("ix_job_created_id", "created_at", "id"),
    )

    def __repr__(self) -> str:
        return f"<Job id={self.id} title={self.title!r} company={self.company_name!r}>"
