import os
from datetime import datetime, timedelta, timezone

import pytest

from lexirep.application.config import SrsSettings
from lexirep.domain.models import ScheduleState, VocabularyCard

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears LEXIREP_* variables."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and environment overrides
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("LEXIREP_"):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    """Default settings with load balancing off, for exact interval checks."""
    return SrsSettings(load_balance=False)


@pytest.fixture
def make_card():
    def _make(word="word", interval=None, ease=250, repetition=0, due_in=0, **kwargs):
        schedule = None
        if interval is not None:
            schedule = ScheduleState(
                due_date=NOW + timedelta(days=due_in),
                interval=interval,
                ease=ease,
                review_count=kwargs.pop("schedule_reviews", 1),
                lapse_count=kwargs.pop("lapse_count", 0),
                delayed_days=kwargs.pop("delayed_days", 0),
                repetition=repetition,
            )
            kwargs.setdefault("review_count", 1)
        return VocabularyCard(word=word, schedule=schedule, **kwargs)

    return _make
