import asyncio

import pytest

from app.common.errors import NotFoundError, PersistenceError, ValidationError
from app.features.practice.repository import PracticeRepository
from app.features.practice.service import PracticeService, compute_percentage, score_answers
from app.features.practice.schemas import PracticeAnswer

STUDENT = "11111111-1111-1111-1111-111111111111"
OTHER = "22222222-2222-2222-2222-222222222222"
OTHER_TOPIC = "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb"
TOPIC = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"


def _answers(correct, total):
    return [
        {"questionIndex": i, "selectedOption": 1 if i < correct else 2, "correctOption": 1, "question": f"Q{i}"}
        for i in range(total)
    ]


@pytest.fixture
def fake(make_fake_supabase):
    return make_fake_supabase()


@pytest.fixture
def service(fake):
    return PracticeService(repository=PracticeRepository())


def test_compute_percentage_rounds_half_up():
    assert compute_percentage(1, 3) == 33.33
    assert compute_percentage(2, 3) == 66.67
    assert compute_percentage(1, 8) == 12.5
    assert compute_percentage(0, 0) == 0.0


def test_score_answers_pass_boundary():
    answers = [PracticeAnswer.model_validate(a) for a in _answers(4, 5)]
    assert score_answers(answers) == (4, 5, 80.0, True)
    answers = [PracticeAnswer.model_validate(a) for a in _answers(3, 5)]
    assert score_answers(answers)[3] is False


def test_null_selection_counts_as_wrong():
    answer = PracticeAnswer.model_validate({"questionIndex": 0, "selectedOption": None, "correctOption": 0})
    assert answer.is_correct is False


def test_attempt_numbers_increase_from_one(service, fake):
    async def run():
        out = []
        for correct in (3, 5, 4):
            out.append(
                await service.record_attempt(
                    student_id=STUDENT, topic_id=TOPIC, answers=_answers(correct, 5), time_taken_seconds=42
                )
            )
        return out

    attempts = asyncio.run(run())
    assert [a.attempt_number for a in attempts] == [1, 2, 3]
    assert attempts[0].percentage == 60.0 and attempts[0].passed is False
    assert attempts[1].percentage == 100.0 and attempts[1].passed is True
    assert attempts[2].time_taken_seconds == 42
    assert len(fake.tables["practice_attempts"]) == 3


def test_concurrent_attempts_get_distinct_numbers(service, fake):
    async def run():
        return await asyncio.gather(
            *[
                service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(i, 4))
                for i in range(4)
            ]
        )

    attempts = asyncio.run(run())
    assert sorted(a.attempt_number for a in attempts) == [1, 2, 3, 4]
    stored = sorted(r["attempt_number"] for r in fake.tables["practice_attempts"])
    assert stored == [1, 2, 3, 4]


def test_best_score_keeps_maximum(service, fake):
    async def run():
        for correct in (6, 9, 7):
            await service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(correct, 10))
        return await service.get_attempts(student_id=STUDENT, topic_id=TOPIC)

    listing = asyncio.run(run())
    best_rows = fake.tables["practice_scores"]
    assert len(best_rows) == 1
    assert best_rows[0]["percentage"] == 90.0
    assert best_rows[0]["score"] == 9
    assert listing.best_percentage == 90.0
    assert [a.attempt_number for a in listing.attempts] == [3, 2, 1]


def test_best_score_tie_keeps_first_writer(service, fake):
    async def run():
        await service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(1, 2))
        first_updated = fake.tables["practice_scores"][0]["updated_at"]
        await service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(2, 4))
        return first_updated

    first_updated = asyncio.run(run())
    row = fake.tables["practice_scores"][0]
    assert row["updated_at"] == first_updated
    assert row["total"] == 2


@pytest.mark.parametrize("answers", [None, [], "abc", [{"questionIndex": 0}], [1, 2]])
def test_invalid_answers_rejected_without_writes(service, fake, answers):
    with pytest.raises(ValidationError):
        asyncio.run(service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=answers))
    assert fake.calls == []


def test_empty_history_has_zero_best(service):
    listing = asyncio.run(service.get_attempts(student_id=STUDENT, topic_id=TOPIC))
    assert listing.attempts == []
    assert listing.best_percentage == 0.0


def test_attempt_detail_includes_answers(service):
    async def run():
        attempt = await service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(1, 2))
        return await service.get_attempt_detail(student_id=STUDENT, attempt_id=attempt.id, topic_id=TOPIC)

    detail = asyncio.run(run())
    assert len(detail.answers) == 2
    assert detail.answers[0]["selectedOption"] == 1
    assert detail.answers[0]["question"] == "Q0"


def test_attempt_detail_hidden_from_other_learner(service):
    async def run():
        attempt = await service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(1, 2))
        await service.get_attempt_detail(student_id=OTHER, attempt_id=attempt.id)

    with pytest.raises(NotFoundError):
        asyncio.run(run())


def test_attempt_detail_wrong_topic_not_found(service):
    async def run():
        attempt = await service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(1, 2))
        await service.get_attempt_detail(student_id=STUDENT, attempt_id=attempt.id, topic_id=OTHER_TOPIC)

    with pytest.raises(NotFoundError):
        asyncio.run(run())


def test_attempt_is_one_store_call(service, fake):
    asyncio.run(service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(1, 2)))
    assert fake.calls == [("record_practice_attempt", "rpc")]


def test_store_failure_raises_persistence_error(service, fake):
    fake.fail_rpcs.add("record_practice_attempt")
    with pytest.raises(PersistenceError):
        asyncio.run(service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(1, 2)))
    assert fake.tables.get("practice_attempts", []) == []
    assert fake.tables.get("practice_scores", []) == []


def test_failed_attempt_leaves_history_and_best_untouched(service, fake):
    async def run():
        await service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(1, 2))
        fake.fail_rpcs.add("record_practice_attempt")
        with pytest.raises(PersistenceError):
            await service.record_attempt(student_id=STUDENT, topic_id=TOPIC, answers=_answers(2, 2))
        fake.fail_rpcs.clear()
        return await service.get_attempts(student_id=STUDENT, topic_id=TOPIC)

    listing = asyncio.run(run())
    assert [a.percentage for a in listing.attempts] == [50.0]
    assert [r["percentage"] for r in fake.tables["practice_scores"]] == [50.0]


@pytest.mark.parametrize("topic_id", ["not-a-uuid", "t1", "aaaaaaaa-aaaa"])
def test_non_uuid_topic_rejected_without_writes(service, fake, topic_id):
    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(service.record_attempt(student_id=STUDENT, topic_id=topic_id, answers=_answers(1, 2)))
    assert excinfo.value.code == "invalid_topic_id"
    assert fake.calls == []


def test_non_uuid_topic_lists_nothing(service, fake):
    listing = asyncio.run(service.get_attempts(student_id=STUDENT, topic_id="not-a-uuid"))
    assert listing.attempts == []
    assert listing.best_percentage == 0.0
    assert fake.calls == []


@pytest.mark.parametrize(
    "attempt_id, topic_id",
    [("not-a-uuid", None), ("not-a-uuid", TOPIC), ("cccccccc-cccc-cccc-cccc-cccccccccccc", "t1")],
)
def test_non_uuid_ids_on_detail_are_not_found(service, fake, attempt_id, topic_id):
    with pytest.raises(NotFoundError):
        asyncio.run(service.get_attempt_detail(student_id=STUDENT, attempt_id=attempt_id, topic_id=topic_id))
    assert fake.calls == []
