from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

OptionValue = Union[int, str]


class PracticeAnswer(BaseModel):
	"""One answered MCQ question as sent by the quiz UI.

	Extra keys (question text, options) are kept so the attempt can be
	reviewed later.
	"""

	model_config = ConfigDict(extra="allow", populate_by_name=True)

	question_index: Optional[int] = Field(default=None, alias="questionIndex")
	selected_option: Optional[OptionValue] = Field(alias="selectedOption")
	correct_option: OptionValue = Field(alias="correctOption")

	@property
	def is_correct(self) -> bool:
		return self.selected_option is not None and self.selected_option == self.correct_option


class PracticeAttemptRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	topic_id: str = Field(alias="topicId", min_length=1)
	answers: List[Dict[str, Any]]
	time_taken_seconds: int = Field(default=0, alias="timeTakenSeconds", ge=0)


class PracticeAttemptSummary(BaseModel):
	id: str
	topic_id: Optional[str] = None
	attempt_number: int
	score: int
	total: int
	percentage: float
	passed: bool
	time_taken_seconds: int = 0
	created_at: Optional[datetime] = None


class PracticeAttemptDetail(PracticeAttemptSummary):
	answers: List[Dict[str, Any]] = Field(default_factory=list)


class PracticeAttemptList(BaseModel):
	attempts: List[PracticeAttemptSummary] = Field(default_factory=list)
	best_percentage: float = 0.0


class PracticeBestScoreOut(BaseModel):
	id: Optional[str] = None
	topic_id: str
	score: int
	total: int
	percentage: float
	updated_at: Optional[datetime] = None
