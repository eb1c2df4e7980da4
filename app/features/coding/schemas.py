from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ChallengeTestCase(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	input: str = ""
	expected_output: str = Field(default="", alias="expectedOutput")


class WebChallengeSpec(BaseModel):
	"""Browser-evaluated challenge (HTML/CSS/JS). Validated client side, if at all."""

	kind: Literal["web"] = "web"
	topic_id: str
	language: str
	starter_code: str = ""
	test_script: Optional[str] = None

	@property
	def has_test_script(self) -> bool:
		return bool(self.test_script and self.test_script.strip())


class ExecutedChallengeSpec(BaseModel):
	"""Server-executed challenge compared against stdout."""

	kind: Literal["executed"] = "executed"
	topic_id: str
	language: str
	starter_code: str = ""
	test_cases: List[ChallengeTestCase] = Field(default_factory=list)
	fallback_expected_output: str = ""


ChallengeSpec = Annotated[Union[WebChallengeSpec, ExecutedChallengeSpec], Field(discriminator="kind")]


class CodingSubmitRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	topic_id: str = Field(alias="topicId", min_length=1)
	code: str
	language: Optional[str] = None
	test_results: Optional[List[str]] = Field(default=None, alias="testResults")


class CaseResult(BaseModel):
	input: str = ""
	expected: str
	actual: str
	passed: bool


class ScriptCheckSummary(BaseModel):
	total: int
	passed: int
	visual: bool = False


JudgeResultItem = Union[CaseResult, ScriptCheckSummary]


class CodingSubmissionOut(BaseModel):
	id: Optional[str] = None
	topic_id: str
	passed: bool
	code: str = ""
	output: str = ""
	language: str
	updated_at: Optional[datetime] = None


class CodingJudgeResponse(BaseModel):
	id: Optional[str] = None
	student_id: str
	topic_id: str
	passed: bool
	language: str
	output: str = ""
	results: List[JudgeResultItem] = Field(default_factory=list)


class CodingSubmissionEnvelope(BaseModel):
	submission: Optional[CodingSubmissionOut] = None
