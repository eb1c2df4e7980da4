from sqlalchemy import Column, String, DateTime, UniqueConstraint, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
import uuid
from app.db.base import Base


class TopicCompletion(Base):
    __tablename__ = "topic_completions"
    __table_args__ = (
        UniqueConstraint("student_id", "topic_id", "item_type", name="uq_topic_completions_item"),
        CheckConstraint(
            "item_type IN ('video', 'ppt', 'practice', 'codingPractice')",
            name="ck_topic_completions_item_type",
        ),
    )
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    topic_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    item_type = Column(String(32), nullable=False)
    completed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
