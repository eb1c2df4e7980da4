"""create scoring tables

Revision ID: 3c1d5e7f9a20
Revises:
Create Date: 2026-02-16 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1d5e7f9a20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the scoring tables when missing.

    ``students`` and ``topics`` are owned by the course platform; the tables
    below only reference them.
    """
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS public.practice_attempts (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          student_id UUID NOT NULL REFERENCES public.students(id) ON DELETE CASCADE,
          topic_id UUID NOT NULL REFERENCES public.topics(id) ON DELETE CASCADE,
          attempt_number INTEGER NOT NULL DEFAULT 1,
          score INTEGER NOT NULL DEFAULT 0,
          total INTEGER NOT NULL DEFAULT 0,
          percentage NUMERIC(5,2) NOT NULL DEFAULT 0,
          passed BOOLEAN NOT NULL DEFAULT false,
          time_taken_seconds INTEGER NOT NULL DEFAULT 0,
          answers JSONB NOT NULL DEFAULT '[]'::jsonb,
          created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          CONSTRAINT uq_practice_attempts_number UNIQUE (student_id, topic_id, attempt_number),
          CONSTRAINT ck_practice_attempts_number_positive CHECK (attempt_number >= 1),
          CONSTRAINT ck_practice_attempts_percentage CHECK (percentage >= 0 AND percentage <= 100)
        );
        CREATE INDEX IF NOT EXISTS ix_practice_attempts_student_id ON public.practice_attempts (student_id);
        CREATE INDEX IF NOT EXISTS ix_practice_attempts_topic_id ON public.practice_attempts (topic_id);
        """
    )
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS public.practice_scores (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          student_id UUID NOT NULL REFERENCES public.students(id) ON DELETE CASCADE,
          topic_id UUID NOT NULL REFERENCES public.topics(id) ON DELETE CASCADE,
          score INTEGER NOT NULL DEFAULT 0,
          total INTEGER NOT NULL DEFAULT 0,
          percentage NUMERIC(5,2) NOT NULL DEFAULT 0,
          created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          CONSTRAINT uq_practice_scores_student_topic UNIQUE (student_id, topic_id),
          CONSTRAINT ck_practice_scores_percentage CHECK (percentage >= 0 AND percentage <= 100)
        );
        CREATE INDEX IF NOT EXISTS ix_practice_scores_student_id ON public.practice_scores (student_id);
        CREATE INDEX IF NOT EXISTS ix_practice_scores_topic_id ON public.practice_scores (topic_id);
        """
    )
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS public.coding_submissions (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          student_id UUID NOT NULL REFERENCES public.students(id) ON DELETE CASCADE,
          topic_id UUID NOT NULL REFERENCES public.topics(id) ON DELETE CASCADE,
          passed BOOLEAN NOT NULL DEFAULT false,
          code TEXT NOT NULL DEFAULT '',
          output TEXT NOT NULL DEFAULT '',
          language VARCHAR(32) NOT NULL DEFAULT 'javascript',
          created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          CONSTRAINT uq_coding_submissions_student_topic UNIQUE (student_id, topic_id)
        );
        CREATE INDEX IF NOT EXISTS ix_coding_submissions_student_id ON public.coding_submissions (student_id);
        CREATE INDEX IF NOT EXISTS ix_coding_submissions_topic_id ON public.coding_submissions (topic_id);
        """
    )
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS public.topic_completions (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          student_id UUID NOT NULL REFERENCES public.students(id) ON DELETE CASCADE,
          topic_id UUID NOT NULL REFERENCES public.topics(id) ON DELETE CASCADE,
          item_type VARCHAR(32) NOT NULL,
          completed_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          CONSTRAINT uq_topic_completions_item UNIQUE (student_id, topic_id, item_type),
          CONSTRAINT ck_topic_completions_item_type
            CHECK (item_type IN ('video', 'ppt', 'practice', 'codingPractice'))
        );
        CREATE INDEX IF NOT EXISTS ix_topic_completions_student_id ON public.topic_completions (student_id);
        CREATE INDEX IF NOT EXISTS ix_topic_completions_topic_id ON public.topic_completions (topic_id);
        """
    )
    # coding_submissions.updated_at drives "most recent first" ordering
    op.execute(
        """
        CREATE OR REPLACE FUNCTION public.touch_scoring_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
          NEW.updated_at = now();
          RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;

        DROP TRIGGER IF EXISTS trg_coding_submissions_updated_at ON public.coding_submissions;
        CREATE TRIGGER trg_coding_submissions_updated_at
          BEFORE UPDATE ON public.coding_submissions
          FOR EACH ROW EXECUTE FUNCTION public.touch_scoring_updated_at();
        """
    )


def downgrade() -> None:
    op.execute(
        """
        DROP TRIGGER IF EXISTS trg_coding_submissions_updated_at ON public.coding_submissions;
        DROP FUNCTION IF EXISTS public.touch_scoring_updated_at();
        DROP TABLE IF EXISTS public.topic_completions;
        DROP TABLE IF EXISTS public.coding_submissions;
        DROP TABLE IF EXISTS public.practice_scores;
        DROP TABLE IF EXISTS public.practice_attempts;
        """
    )
