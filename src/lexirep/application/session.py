"""
Review session orchestration.

Tracks progress through a bounded list of due cards and delegates each
response to the scheduler. Single-threaded: one session per manager.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from ulid import ULID

from lexirep.application.scheduler import SM2Scheduler
from lexirep.application.scheduler.sm2 import utcnow
from lexirep.domain.constants import SESSION_ID_PREFIX
from lexirep.domain.errors import InvalidSessionStateError
from lexirep.domain.models import (
    IntervalPreview,
    Response,
    ReviewSession,
    ScheduleState,
    VocabularyCard,
)

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETE = "complete"


@dataclass
class ProcessResult:
    """Outcome of processing one review."""

    updated_card: VocabularyCard
    next_card: VocabularyCard | None
    session_complete: bool


def generate_session_id() -> str:
    return f"{SESSION_ID_PREFIX}{ULID()}"


class SessionManager:
    """
    Drives one review session at a time.

    Starting a new session silently replaces the active one. Use separate
    managers (each with its own scheduler) for independent review streams.
    """

    def __init__(self, scheduler: SM2Scheduler | None = None):
        self._scheduler = scheduler or SM2Scheduler()
        self._session: ReviewSession | None = None
        self._status = SessionStatus.IDLE

    @property
    def scheduler(self) -> SM2Scheduler:
        return self._scheduler

    @property
    def status(self) -> SessionStatus:
        return self._status

    def start(
        self, due_cards: list[VocabularyCard], max_cards: int | None = None
    ) -> ReviewSession:
        """
        Start a session over the given cards, truncated to max_cards if given.
        """
        cards = list(due_cards[:max_cards] if max_cards else due_cards)

        if self._session is not None:
            logger.info(f"Replacing active session {self._session.session_id}")

        self._session = ReviewSession(
            session_id=generate_session_id(),
            start_time=utcnow(),
            cards_reviewed=0,
            total_cards=len(cards),
            completed_cards=[],
            current_card=cards[0] if cards else None,
            remaining_cards=cards,
        )
        self._status = SessionStatus.ACTIVE
        logger.info(f"Started session {self._session.session_id} with {len(cards)} cards")
        return self._session

    def process(
        self,
        card: VocabularyCard,
        response: Response,
        now: datetime | None = None,
    ) -> ProcessResult:
        """
        Schedule a review response and advance the session.

        Raises:
            InvalidSessionStateError: If no session is active.
        """
        session = self._session
        if session is None:
            raise InvalidSessionStateError()

        now = now or utcnow()
        result = self._scheduler.schedule(response, card.schedule, now=now)

        prior = card.schedule
        review_count = (prior.review_count if prior else 0) + 1
        lapse_count = (prior.lapse_count if prior else 0) + (1 if response is Response.HARD else 0)

        updated = replace(
            card,
            review_count=review_count,
            difficulty=response.value,
            last_reviewed=now,
            schedule=ScheduleState(
                due_date=result.due_date,
                interval=result.interval,
                ease=result.ease,
                review_count=review_count,
                lapse_count=lapse_count,
                delayed_days=prior.delayed_days if prior else 0,
                repetition=result.repetition,
            ),
        )

        session.cards_reviewed += 1
        session.completed_cards.append(updated)

        remaining = session.remaining_cards
        next_card = (
            remaining[session.cards_reviewed]
            if session.cards_reviewed < len(remaining)
            else None
        )
        session.current_card = next_card

        complete = next_card is None or session.cards_reviewed >= session.total_cards
        if complete:
            self._status = SessionStatus.COMPLETE
            logger.info(
                f"Session {session.session_id} complete: {session.cards_reviewed} reviewed"
            )
            self.end()

        return ProcessResult(updated_card=updated, next_card=next_card, session_complete=complete)

    def end(self) -> ReviewSession | None:
        """Clear the active session and return it."""
        session = self._session
        self._session = None
        self._status = SessionStatus.IDLE
        return session

    def get_current(self) -> ReviewSession | None:
        return self._session

    def preview(
        self, card: VocabularyCard, now: datetime | None = None
    ) -> dict[Response, IntervalPreview]:
        """Next intervals for each response, without committing any."""
        return self._scheduler.preview(card.schedule, now=now)

    def reset_card_schedule(self, card: VocabularyCard) -> VocabularyCard:
        """Return the card as if it had never been reviewed."""
        return replace(card, review_count=0, last_reviewed=None, schedule=None)

    def set_card_difficulty(
        self,
        card: VocabularyCard,
        response: Response,
        now: datetime | None = None,
    ) -> VocabularyCard:
        """
        Re-grade a card outside of a session (bulk operations).

        Unlike process(), review_count and last_reviewed on the card itself
        are left alone and delayed_days is reset.
        """
        result = self._scheduler.schedule(response, card.schedule, now=now)
        prior = card.schedule
        return replace(
            card,
            difficulty=response.value,
            schedule=ScheduleState(
                due_date=result.due_date,
                interval=result.interval,
                ease=result.ease,
                review_count=(prior.review_count if prior else 0) + 1,
                lapse_count=(prior.lapse_count if prior else 0) + (1 if response is Response.HARD else 0),
                delayed_days=0,
                repetition=result.repetition,
            ),
        )
