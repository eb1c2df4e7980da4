"""add record_practice_attempt function

Revision ID: 5e3f7a9b1c42
Revises: 4d2e6f8a0b31
Create Date: 2026-02-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5e3f7a9b1c42"
down_revision: Union[str, Sequence[str], None] = "4d2e6f8a0b31"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Record one MCQ attempt and raise the best score in a single transaction.

    A transaction-scoped advisory lock on (student, topic) serializes attempt
    numbering for the pair; the unique constraint on attempt_number stays as a
    backstop. Any error rolls back both the attempt and the best-score write.
    """
    op.execute(
        """
        CREATE OR REPLACE FUNCTION public.record_practice_attempt(
          p_student_id UUID,
          p_topic_id UUID,
          p_score INTEGER,
          p_total INTEGER,
          p_percentage NUMERIC,
          p_passed BOOLEAN,
          p_time_taken_seconds INTEGER,
          p_answers JSONB
        )
        RETURNS SETOF public.practice_attempts
        LANGUAGE plpgsql
        AS $$
        DECLARE
          v_next INTEGER;
          v_row public.practice_attempts;
        BEGIN
          PERFORM pg_advisory_xact_lock(hashtextextended(p_student_id::text || ':' || p_topic_id::text, 0));

          SELECT COALESCE(MAX(attempt_number), 0) + 1 INTO v_next
            FROM public.practice_attempts
           WHERE student_id = p_student_id AND topic_id = p_topic_id;

          INSERT INTO public.practice_attempts
            (student_id, topic_id, attempt_number, score, total, percentage, passed, time_taken_seconds, answers)
          VALUES
            (p_student_id, p_topic_id, v_next, p_score, p_total, p_percentage, p_passed, p_time_taken_seconds,
             COALESCE(p_answers, '[]'::jsonb))
          RETURNING * INTO v_row;

          PERFORM public.upsert_practice_best_score(p_student_id, p_topic_id, p_score, p_total, p_percentage);

          RETURN NEXT v_row;
        END;
        $$;
        """
    )


def downgrade() -> None:
    op.execute(
        """
        DROP FUNCTION IF EXISTS public.record_practice_attempt(UUID, UUID, INTEGER, INTEGER, NUMERIC, BOOLEAN, INTEGER, JSONB);
        """
    )
