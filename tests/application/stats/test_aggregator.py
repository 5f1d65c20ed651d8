from datetime import timedelta

import pytest

from lexirep.application.stats.aggregator import (
    classify,
    due_now,
    due_within_days,
    learning_cards,
    mature_cards,
    new_cards,
    recommended_daily_load,
    sm2_breakdown,
)
from lexirep.domain.models import ScheduleState, VocabularyCard


@pytest.fixture
def collection(make_card):
    return [
        make_card("new1"),
        make_card("new2"),
        make_card("learning", interval=6, ease=250, repetition=2, due_in=-1),
        make_card("mature", interval=30, ease=270, repetition=4, due_in=5),
        make_card("far", interval=100, ease=130, repetition=0, due_in=40),
    ]


def test_due_now_includes_unscheduled(collection, now):
    due = due_now(collection, now)
    assert [c.word for c in due] == ["new1", "new2", "learning"]


def test_due_now_boundary_is_inclusive(make_card, now):
    card = make_card("edge", interval=3, due_in=0)
    assert due_now([card], now) == [card]

    later = make_card("later", interval=3)
    later.schedule = ScheduleState(
        due_date=now + timedelta(seconds=1), interval=3, ease=250
    )
    assert due_now([later], now) == []


def test_due_within_days(collection, now):
    assert due_within_days(collection, 0, now) == 3
    assert due_within_days(collection, 7, now) == 4
    assert due_within_days(collection, 60, now) == 5


def test_classify(collection):
    stats = classify(collection)

    assert stats.total == 5
    assert stats.new == 2
    assert stats.learning == 1
    assert stats.mature == 2
    assert stats.average_ease == 217  # (250 + 270 + 130) / 3 = 216.67
    assert stats.average_interval == 45  # (6 + 30 + 100) / 3 = 45.33


def test_classify_empty():
    stats = classify([])
    assert (stats.total, stats.new, stats.learning, stats.mature) == (0, 0, 0, 0)
    assert stats.average_ease == 0
    assert stats.average_interval == 0


def test_scheduled_card_with_zero_reviews_counts_as_new(make_card):
    card = make_card("fresh", interval=30, review_count=0)
    stats = classify([card])

    assert stats.new == 1
    assert stats.mature == 0
    assert stats.average_interval == 30


def test_filters(collection):
    assert [c.word for c in new_cards(collection)] == ["new1", "new2"]
    assert [c.word for c in learning_cards(collection)] == ["learning"]
    assert [c.word for c in mature_cards(collection)] == ["mature", "far"]


def test_recommended_daily_load(collection, now):
    load = recommended_daily_load(collection, now=now)
    assert load.new_cards == 2
    assert load.review_cards == 1
    assert load.total == 3


def test_recommended_daily_load_caps(now):
    cards = [VocabularyCard(word=f"w{i}") for i in range(30)]
    load = recommended_daily_load(cards, max_new=20, max_review=100, now=now)

    assert load.new_cards == 20
    assert load.review_cards == 10


def test_recommended_daily_load_review_cap(make_card, now):
    cards = [make_card(f"w{i}", interval=3, due_in=-1) for i in range(150)]
    load = recommended_daily_load(cards, max_new=20, max_review=100, now=now)

    assert load.new_cards == 0
    assert load.review_cards == 100


def test_recommended_daily_load_never_negative(make_card, now):
    # Scheduled in the future but never reviewed: new, not due
    cards = [make_card("x", interval=3, due_in=5, review_count=0)]
    load = recommended_daily_load(cards, now=now)
    assert load.new_cards == 1
    assert load.review_cards == 0


def test_sm2_breakdown(collection):
    b = sm2_breakdown(collection)

    assert b.total == 5
    assert b.new == 2
    assert b.learning == 1
    assert b.mature == 2
    assert b.repetitions == {"rep0": 3, "rep1": 0, "rep2": 1, "rep3_plus": 1}
    assert b.average_efactor == pytest.approx(2.17)
    assert b.average_interval == 45
    assert b.efactor_distribution == [("1.3-1.5", 1), ("2.5-3.0", 2)]
    assert b.interval_distribution == [("2-6 days", 1), ("21-60 days", 1), ("2-6 months", 1)]


def test_sm2_breakdown_empty():
    b = sm2_breakdown([])
    assert b.total == 0
    assert b.average_efactor == 0.0
    assert b.efactor_distribution == []
