"""
Deck Stats Service: Application layer orchestrator.

Coordinates loading cards from the repository and summarizing them.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from lexirep.application.config import SrsSettings
from lexirep.domain.models import VocabularyCard
from lexirep.domain.ports import DeckRepository

from .aggregator import (
    CollectionStats,
    DailyLoad,
    Sm2Breakdown,
    classify,
    due_now,
    due_within_days,
    recommended_daily_load,
    sm2_breakdown,
)

logger = logging.getLogger(__name__)


@dataclass
class DeckReport:
    """Everything the stats command shows for one deck."""

    collection: CollectionStats
    daily_load: DailyLoad
    due_today: int
    due_this_week: int
    breakdown: Sm2Breakdown


class DeckStatsService:
    """
    Application service for summarizing a deck.

    Depends on the DeckRepository abstraction, not a concrete file format.
    """

    def __init__(self, deck_repo: DeckRepository, settings: SrsSettings):
        """
        Args:
            deck_repo: The repository (port) for loading cards.
            settings: Supplies the daily new/review limits.
        """
        self._repo = deck_repo
        self._settings = settings

    def report(self, now: datetime | None = None) -> DeckReport:
        cards = self._repo.load_cards()
        logger.debug(f"Summarizing {len(cards)} cards")
        return self.summarize(cards, now=now)

    def summarize(self, cards: list[VocabularyCard], now: datetime | None = None) -> DeckReport:
        return DeckReport(
            collection=classify(cards),
            daily_load=recommended_daily_load(
                cards,
                max_new=self._settings.max_new_per_day,
                max_review=self._settings.max_review_per_day,
                now=now,
            ),
            due_today=len(due_now(cards, now)),
            due_this_week=due_within_days(cards, 7, now),
            breakdown=sm2_breakdown(cards),
        )
