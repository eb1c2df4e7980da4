from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ItemType = Literal["video", "ppt", "practice", "codingPractice"]


class CompletionRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	topic_id: str = Field(alias="topicId")
	# validated in the service so the error code matches the other features
	item_type: str = Field(alias="itemType")


class CompletionOut(BaseModel):
	id: Optional[str] = None
	student_id: str
	topic_id: str
	item_type: ItemType
	completed_at: Optional[datetime] = None


class CompletionsResponse(BaseModel):
	completions: Dict[str, List[ItemType]] = Field(default_factory=dict)
