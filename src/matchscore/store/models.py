"""ORM mapping for persisted score records."""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Index, Integer, String, text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MatchScore(Base):
    """
    One calculated compatibility score.

    At most one row per (worker_id, job_id) has is_current set; forced
    recalculation demotes the previous row, keeping it as history.
    """
    __tablename__ = "match_score"

    id = Column(Integer, primary_key=True, autoincrement=True)
    worker_id = Column(String(128), nullable=False)
    job_id = Column(String(128), nullable=False)
    calculated_at = Column(DateTime(timezone=True), nullable=False)
    is_current = Column(Boolean, nullable=False, default=True)

    skills_score = Column(Float, nullable=False)
    experience_score = Column(Float, nullable=False)
    location_score = Column(Float, nullable=False)
    availability_score = Column(Float, nullable=False)
    education_score = Column(Float, nullable=False)
    cultural_score = Column(Float, nullable=False)
    overall_score = Column(Float, nullable=False)

    strengths = Column(JSON, nullable=False, default=list)
    weaknesses = Column(JSON, nullable=False, default=list)
    suggestions = Column(JSON, nullable=False, default=list)
    recommendation = Column(String(16), nullable=False)
    version = Column(String(16), nullable=False)
    details = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index(
            "uq_match_score_current_pair",
            "worker_id",
            "job_id",
            unique=True,
            sqlite_where=text("is_current = 1"),
            postgresql_where=text("is_current"),
        ),
        Index("idx_match_score_worker", "worker_id"),
        Index("idx_match_score_job", "job_id"),
        Index("idx_match_score_overall", "overall_score"),
        Index("idx_match_score_calculated", "calculated_at"),
    )
