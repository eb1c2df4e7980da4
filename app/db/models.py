# Import all models here so Alembic can discover them
from app.db.base import Base

from app.features.practice.models import PracticeAttempt, PracticeBestScore
from app.features.coding.models import CodingSubmission
from app.features.completions.models import TopicCompletion

# This ensures all models are registered with SQLAlchemy
__all__ = [
	"Base",
	"PracticeAttempt",
	"PracticeBestScore",
	"CodingSubmission",
	"TopicCompletion",
]
