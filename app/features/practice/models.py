from sqlalchemy import Column, Integer, Boolean, DateTime, Numeric, UniqueConstraint, CheckConstraint, text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid
from app.db.base import Base


class PracticeAttempt(Base):
    """Append-only MCQ attempt history."""

    __tablename__ = "practice_attempts"
    __table_args__ = (
        UniqueConstraint("student_id", "topic_id", "attempt_number", name="uq_practice_attempts_number"),
        CheckConstraint("attempt_number >= 1", name="ck_practice_attempts_number_positive"),
        CheckConstraint("percentage >= 0 AND percentage <= 100", name="ck_practice_attempts_percentage"),
    )
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    topic_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False, default=1)
    score = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False, default=0)
    percentage = Column(Numeric(5, 2), nullable=False, default=0)
    passed = Column(Boolean, nullable=False, default=False)
    time_taken_seconds = Column(Integer, nullable=False, default=0)
    answers = Column(JSONB, nullable=False, server_default=text("'[]'::jsonb"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<PracticeAttempt(student_id={self.student_id}, topic_id={self.topic_id}, n={self.attempt_number})>"


class PracticeBestScore(Base):
    """Best MCQ percentage per learner and topic, only ever raised."""

    __tablename__ = "practice_scores"
    __table_args__ = (
        UniqueConstraint("student_id", "topic_id", name="uq_practice_scores_student_topic"),
        CheckConstraint("percentage >= 0 AND percentage <= 100", name="ck_practice_scores_percentage"),
    )
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    topic_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    score = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False, default=0)
    percentage = Column(Numeric(5, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
