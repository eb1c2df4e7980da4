import asyncio

import pytest

from app.common.errors import ValidationError
from app.features.completions.repository import CompletionsRepository
from app.features.completions.service import CompletionsService

STUDENT = "11111111-1111-1111-1111-111111111111"
T1 = "aaaaaaaa-0000-0000-0000-000000000001"
T2 = "aaaaaaaa-0000-0000-0000-000000000002"
T3 = "aaaaaaaa-0000-0000-0000-000000000003"
C1 = "cccccccc-0000-0000-0000-000000000001"
C2 = "cccccccc-0000-0000-0000-000000000002"
NO_COURSE = "cccccccc-0000-0000-0000-0000000000ff"


@pytest.fixture
def fake(make_fake_supabase):
    return make_fake_supabase(
        {
            "topics": [
                {"id": T1, "course_id": C1},
                {"id": T2, "course_id": C1},
                {"id": T3, "course_id": C2},
            ]
        }
    )


@pytest.fixture
def service(fake):
    return CompletionsService(repository=CompletionsRepository())


def test_mark_complete_is_idempotent(service, fake):
    async def run():
        first = await service.mark_complete(student_id=STUDENT, topic_id=T1, item_type="video")
        second = await service.mark_complete(student_id=STUDENT, topic_id=T1, item_type="video")
        return first, second

    first, second = asyncio.run(run())
    assert first.id == second.id
    assert first.item_type == "video"
    assert first.completed_at is not None
    assert len(fake.tables["topic_completions"]) == 1


@pytest.mark.parametrize("topic_id,item_type", [("", "video"), (T1, ""), (T1, "quiz"), ("t1", "video")])
def test_invalid_completion_rejected(service, fake, topic_id, item_type):
    with pytest.raises(ValidationError):
        asyncio.run(service.mark_complete(student_id=STUDENT, topic_id=topic_id, item_type=item_type))
    assert fake.calls == []


def test_completions_grouped_and_filtered_by_course(service):
    async def run():
        await service.mark_complete(student_id=STUDENT, topic_id=T1, item_type="video")
        await service.mark_complete(student_id=STUDENT, topic_id=T1, item_type="codingPractice")
        await service.mark_complete(student_id=STUDENT, topic_id=T3, item_type="ppt")
        await service.mark_complete(student_id="someone-else", topic_id=T2, item_type="ppt")
        everything = await service.get_completions(student_id=STUDENT)
        course = await service.get_completions(student_id=STUDENT, course_id=C1)
        empty = await service.get_completions(student_id=STUDENT, course_id=NO_COURSE)
        return everything, course, empty

    everything, course, empty = asyncio.run(run())
    assert everything.completions == {T1: ["video", "codingPractice"], T3: ["ppt"]}
    assert course.completions == {T1: ["video", "codingPractice"]}
    assert empty.completions == {}


def test_non_uuid_course_lists_nothing(service, fake):
    response = asyncio.run(service.get_completions(student_id=STUDENT, course_id="c1"))
    assert response.completions == {}
    assert fake.calls == []
