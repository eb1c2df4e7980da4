from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from app.common.errors import ExecutionFailure, NotFoundError, ValidationError
from app.common.utils import parse_timestamp, parse_uuid
from app.features.coding.repository import challenge_spec_store, coding_submissions_repository
from app.features.coding.schemas import (
    CaseResult,
    ChallengeSpec,
    CodingJudgeResponse,
    CodingSubmissionOut,
    ExecutedChallengeSpec,
    JudgeResultItem,
    ScriptCheckSummary,
    WebChallengeSpec,
)
from app.features.execution.service import execution_service

logger = logging.getLogger("coding")

PASS_MARKER = "PASS"
RESULTS_MISSING_OUTPUT = "Test results not received"
VISUAL_COMPLETED_OUTPUT = "Completed"
CASE_OUTPUT_SEPARATOR = "\n---\n"


@dataclass
class JudgeOutcome:
    passed: bool
    output: str
    results: List[JudgeResultItem] = field(default_factory=list)


def judge_client_results(spec: WebChallengeSpec, client_test_results: Optional[Sequence[Any]]) -> JudgeOutcome:
    """Verdict for a browser-evaluated challenge.

    Nothing is executed here. With a test script the learner's browser must
    have reported per-assertion outcomes; without one the challenge is a
    visual exercise and completes on submit.
    """
    if not spec.has_test_script:
        return JudgeOutcome(
            passed=True,
            output=VISUAL_COMPLETED_OUTPUT,
            results=[ScriptCheckSummary(total=0, passed=0, visual=True)],
        )
    outcomes = [str(item) for item in (client_test_results or [])]
    if not outcomes:
        return JudgeOutcome(
            passed=False,
            output=RESULTS_MISSING_OUTPUT,
            results=[ScriptCheckSummary(total=1, passed=0)],
        )
    passed_count = sum(1 for item in outcomes if item == PASS_MARKER)
    return JudgeOutcome(
        passed=passed_count == len(outcomes),
        output="\n".join(outcomes),
        results=[ScriptCheckSummary(total=len(outcomes), passed=passed_count)],
    )


class CodingJudgeService:
    def __init__(self, store=challenge_spec_store, repository=coding_submissions_repository, executor=execution_service):
        self.store = store
        self.repository = repository
        self.executor = executor
        self._judges: Dict[str, Callable[..., Awaitable[JudgeOutcome]]] = {
            "web": self._judge_web,
            "executed": self._judge_executed,
        }

    async def _run(self, code: str, language: str, stdin: str) -> tuple[str, bool]:
        """Execute once and return (trimmed output, ok).

        Failures never escape: their text becomes the actual output.
        """
        try:
            result = await self.executor.execute(code, language, stdin)
        except ExecutionFailure as exc:
            logger.info("execution_failed language=%s code=%s detail=%s", language, exc.code, exc.message)
            return (exc.message or "").strip(), False
        return (result.output or "").strip(), True

    async def _judge_web(self, spec: WebChallengeSpec, code: str, client_test_results: Optional[Sequence[Any]]) -> JudgeOutcome:
        return judge_client_results(spec, client_test_results)

    async def _judge_executed(self, spec: ExecutedChallengeSpec, code: str, client_test_results: Optional[Sequence[Any]]) -> JudgeOutcome:
        if not spec.test_cases:
            expected = spec.fallback_expected_output.strip()
            actual, ok = await self._run(code, spec.language, "")
            passed = ok and actual == expected
            return JudgeOutcome(
                passed=passed,
                output=actual,
                results=[CaseResult(expected=expected, actual=actual, passed=passed)],
            )

        # Cases run one at a time; a failure only fails its own case
        results: List[CaseResult] = []
        for case in spec.test_cases:
            expected = case.expected_output.strip()
            actual, ok = await self._run(code, spec.language, case.input)
            results.append(CaseResult(input=case.input, expected=expected, actual=actual, passed=ok and actual == expected))
        return JudgeOutcome(
            passed=all(r.passed for r in results),
            output=CASE_OUTPUT_SEPARATOR.join(r.actual for r in results),
            results=list(results),
        )

    async def judge_submission(
        self,
        *,
        student_id: str,
        topic_id: str,
        code: Optional[str],
        language: Optional[str] = None,
        client_test_results: Optional[Sequence[Any]] = None,
    ) -> CodingJudgeResponse:
        """Judge one coding submission and store it as the current verdict."""
        if not topic_id:
            raise ValidationError("topic_required", "topicId is required")
        if not code or not code.strip():
            raise ValidationError("code_required", "code is required")
        topic = parse_uuid(topic_id)
        spec: Optional[ChallengeSpec] = await self.store.get_challenge_spec(topic) if topic else None
        if spec is None:
            raise NotFoundError("challenge_not_found", "No coding practice found for this topic")

        outcome = await self._judges[spec.kind](spec, code, client_test_results)

        row = await self.repository.upsert_submission(
            {
                "student_id": student_id,
                "topic_id": topic,
                "passed": outcome.passed,
                "code": code,
                "output": outcome.output,
                "language": language or spec.language,
            }
        )
        logger.info(
            "coding_submission_judged student_id=%s topic_id=%s kind=%s passed=%s cases=%d",
            student_id,
            topic,
            spec.kind,
            outcome.passed,
            len(outcome.results),
        )
        return CodingJudgeResponse(
            id=str(row["id"]) if row.get("id") is not None else None,
            student_id=str(row.get("student_id") or student_id),
            topic_id=str(row.get("topic_id") or topic),
            passed=bool(row.get("passed", outcome.passed)),
            language=str(row.get("language") or language or spec.language),
            output=str(row.get("output") if row.get("output") is not None else outcome.output),
            results=outcome.results,
        )

    async def get_submission(self, *, student_id: str, topic_id: str) -> Optional[CodingSubmissionOut]:
        topic = parse_uuid(topic_id)
        if topic is None:
            return None
        row = await self.repository.get_submission(student_id, topic)
        if not row:
            return None
        return CodingSubmissionOut(
            id=str(row["id"]) if row.get("id") is not None else None,
            topic_id=str(row.get("topic_id") or topic_id),
            passed=bool(row.get("passed")),
            code=row.get("code") or "",
            output=row.get("output") or "",
            language=row.get("language") or "javascript",
            updated_at=parse_timestamp(row.get("updated_at")),
        )


coding_judge_service = CodingJudgeService()

__all__ = ["coding_judge_service", "CodingJudgeService", "JudgeOutcome", "judge_client_results"]
