from sqlalchemy import Column, String, Text, Boolean, DateTime, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
import uuid
from app.db.base import Base


class CodingSubmission(Base):
    """Latest coding verdict per learner and topic (overwritten on resubmit)."""

    __tablename__ = "coding_submissions"
    __table_args__ = (
        UniqueConstraint("student_id", "topic_id", name="uq_coding_submissions_student_topic"),
    )
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    topic_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    passed = Column(Boolean, nullable=False, default=False)
    code = Column(Text, nullable=False, default="")
    output = Column(Text, nullable=False, default="")
    language = Column(String(32), nullable=False, default="javascript")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<CodingSubmission(student_id={self.student_id}, topic_id={self.topic_id}, passed={self.passed})>"
