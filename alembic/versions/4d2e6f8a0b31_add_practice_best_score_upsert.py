"""add upsert_practice_best_score function

Revision ID: 4d2e6f8a0b31
Revises: 3c1d5e7f9a20
Create Date: 2026-02-16 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4d2e6f8a0b31"
down_revision: Union[str, Sequence[str], None] = "3c1d5e7f9a20"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Single-statement conditional upsert for the best-score cache.

    Inserts the row when the pair has no best score yet, otherwise replaces it
    only when the new percentage is strictly greater. Returns the written row,
    or no row when the stored best was kept. Called through PostgREST RPC.
    """
    op.execute(
        """
        CREATE OR REPLACE FUNCTION public.upsert_practice_best_score(
          p_student_id UUID,
          p_topic_id UUID,
          p_score INTEGER,
          p_total INTEGER,
          p_percentage NUMERIC
        )
        RETURNS SETOF public.practice_scores
        LANGUAGE sql
        AS $$
          INSERT INTO public.practice_scores AS ps (student_id, topic_id, score, total, percentage)
          VALUES (p_student_id, p_topic_id, p_score, p_total, p_percentage)
          ON CONFLICT (student_id, topic_id) DO UPDATE
            SET score = EXCLUDED.score,
                total = EXCLUDED.total,
                percentage = EXCLUDED.percentage,
                updated_at = now()
            WHERE ps.percentage < EXCLUDED.percentage
          RETURNING ps.*;
        $$;
        """
    )


def downgrade() -> None:
    op.execute(
        """
        DROP FUNCTION IF EXISTS public.upsert_practice_best_score(UUID, UUID, INTEGER, INTEGER, NUMERIC);
        """
    )
