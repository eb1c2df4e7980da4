import sys
import os

import pytest

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def make_fake_supabase(monkeypatch):
    """Build an in-memory Supabase seeded with ``tables`` and route repositories to it."""
    from fakesupabase import FakeSupabase, install

    def _make(tables=None):
        return install(monkeypatch, FakeSupabase(tables))

    return _make
