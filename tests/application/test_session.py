"""Tests for review session orchestration."""

from datetime import timedelta

import pytest

from lexirep.application.scheduler import SM2Scheduler
from lexirep.application.session import SessionManager, SessionStatus, generate_session_id
from lexirep.domain.errors import InvalidSessionStateError
from lexirep.domain.models import Response, VocabularyCard


@pytest.fixture
def manager(settings):
    return SessionManager(SM2Scheduler(settings))


@pytest.fixture
def deck():
    return [VocabularyCard(word=w) for w in ("apple", "banana", "cherry")]


class TestLifecycle:
    def test_starts_idle(self, manager):
        assert manager.status is SessionStatus.IDLE
        assert manager.get_current() is None

    def test_start(self, manager, deck):
        session = manager.start(deck)

        assert manager.status is SessionStatus.ACTIVE
        assert session.session_id.startswith("session_")
        assert session.total_cards == 3
        assert session.cards_reviewed == 0
        assert session.current_card is deck[0]
        assert session.completed_cards == []
        assert manager.get_current() is session

    def test_start_truncates_to_max_cards(self, manager, deck):
        session = manager.start(deck, max_cards=2)
        assert session.total_cards == 2
        assert [c.word for c in session.remaining_cards] == ["apple", "banana"]

    def test_second_start_replaces_first(self, manager, deck):
        first = manager.start(deck)
        second = manager.start(deck[:1])

        assert manager.get_current() is second
        assert second.session_id != first.session_id

    def test_end_returns_session(self, manager, deck):
        session = manager.start(deck)
        assert manager.end() is session
        assert manager.status is SessionStatus.IDLE
        assert manager.end() is None

    def test_process_without_session_raises(self, manager, deck):
        with pytest.raises(InvalidSessionStateError, match="No active review session"):
            manager.process(deck[0], Response.GOOD)


class TestProcess:
    def test_advances_through_cards(self, manager, deck, now):
        manager.start(deck)

        first = manager.process(deck[0], Response.GOOD, now=now)
        assert first.next_card is deck[1]
        assert not first.session_complete
        assert manager.get_current().cards_reviewed == 1
        assert manager.get_current().current_card is deck[1]

        manager.process(deck[1], Response.EASY, now=now)
        last = manager.process(deck[2], Response.HARD, now=now)

        assert last.next_card is None
        assert last.session_complete
        assert manager.get_current() is None
        assert manager.status is SessionStatus.IDLE

    def test_completed_cards_collected(self, manager, deck, now):
        session = manager.start(deck)
        for card in deck:
            manager.process(card, Response.GOOD, now=now)

        assert [c.word for c in session.completed_cards] == ["apple", "banana", "cherry"]
        assert session.progress == 100

    def test_updated_card_for_new_card(self, manager, deck, now):
        manager.start(deck)
        result = manager.process(deck[0], Response.GOOD, now=now)
        card = result.updated_card

        assert card is not deck[0]
        assert deck[0].schedule is None
        assert card.review_count == 1
        assert card.difficulty == "good"
        assert card.last_reviewed == now
        assert card.schedule.interval == 1
        assert card.schedule.repetition == 1
        assert card.schedule.review_count == 1
        assert card.schedule.lapse_count == 0
        assert card.schedule.due_date == now + timedelta(days=1)

    def test_hard_counts_lapse(self, manager, make_card, now):
        card = make_card("dog", interval=6, repetition=2, lapse_count=2, delayed_days=3)
        manager.start([card])
        updated = manager.process(card, Response.HARD, now=now).updated_card

        assert updated.schedule.lapse_count == 3
        assert updated.schedule.repetition == 0
        assert updated.schedule.delayed_days == 3
        assert updated.schedule.review_count == 2

    def test_good_does_not_count_lapse(self, manager, make_card, now):
        card = make_card("cat", interval=6, repetition=2, lapse_count=1)
        manager.start([card])
        updated = manager.process(card, Response.GOOD, now=now).updated_card

        assert updated.schedule.lapse_count == 1
        assert updated.schedule.interval == 15

    def test_single_card_session_completes(self, manager, deck, now):
        manager.start(deck, max_cards=1)
        result = manager.process(deck[0], Response.GOOD, now=now)
        assert result.session_complete


class TestCardHelpers:
    def test_preview_does_not_touch_session(self, deck, now):
        manager = SessionManager()
        manager.start(deck)
        previews = manager.preview(deck[0], now=now)

        assert previews[Response.GOOD].interval == 1
        assert manager.get_current().cards_reviewed == 0
        assert len(manager.scheduler.balancer) == 0

    def test_reset_card_schedule(self, manager, make_card):
        card = make_card("owl", interval=30, repetition=4, review_count=4)
        reset = manager.reset_card_schedule(card)

        assert reset.schedule is None
        assert reset.review_count == 0
        assert reset.last_reviewed is None
        assert card.schedule is not None

    def test_set_card_difficulty(self, manager, make_card, now):
        card = make_card("fox", interval=6, repetition=2, delayed_days=4, review_count=2)
        updated = manager.set_card_difficulty(card, Response.EASY, now=now)

        assert updated.difficulty == "easy"
        assert updated.review_count == 2
        assert updated.schedule.delayed_days == 0
        assert updated.schedule.interval == 16
        assert manager.status is SessionStatus.IDLE


def test_session_ids_unique():
    assert generate_session_id() != generate_session_id()
