"""
Queue builder for review sessions.

Builds ordered study queues by:
1. Selecting cards that are due (or never reviewed), optionally from one book
2. Sorting so the most neglected and hardest words come first
3. Capping the queue at the session size
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from lexirep.application.stats.aggregator import due_now
from lexirep.domain.constants import DEFAULT_SESSION_SIZE
from lexirep.domain.models import VocabularyCard

logger = logging.getLogger(__name__)

# Lower sorts first
DIFFICULTY_PRIORITY = {"hard": 0, "good": 1, "easy": 2, "none": 3}


@dataclass
class ReviewQueueResult:
    """Result of queue building operation."""

    queue: list[VocabularyCard]  # Cards to review, in order
    total_due: int  # Due cards before the cap was applied


def build_review_queue(
    cards: list[VocabularyCard],
    limit: int = DEFAULT_SESSION_SIZE,
    now: datetime | None = None,
    book_id: str | None = None,
) -> ReviewQueueResult:
    """
    Build the ordered list of cards to review now.

    Args:
        cards: The whole deck.
        limit: Maximum cards in the queue (0 or less means no cap).
        now: Reference time for due checks.
        book_id: Only queue cards from this book, if given.

    Returns:
        ReviewQueueResult with the capped queue and the uncapped due count.
    """
    due = sorted(due_now(cards_in_book(cards, book_id), now), key=_review_priority)
    queue = due[:limit] if limit > 0 else due

    if len(queue) < len(due):
        logger.info(f"Queue capped at {len(queue)} of {len(due)} due cards")

    return ReviewQueueResult(queue=queue, total_due=len(due))


def cards_in_book(cards: list[VocabularyCard], book_id: str | None) -> list[VocabularyCard]:
    """Cards belonging to `book_id`; the whole deck when no book is given."""
    if book_id is None:
        return cards
    return [c for c in cards if c.book_id == book_id]


def _review_priority(card: VocabularyCard) -> tuple:
    """
    Sort key: reviewed before never-reviewed, oldest review first,
    then harder words, then fewer reviews.
    """
    never_reviewed = card.last_reviewed is None
    last = card.last_reviewed.timestamp() if card.last_reviewed else 0.0
    return (
        never_reviewed,
        last,
        DIFFICULTY_PRIORITY.get(card.difficulty, len(DIFFICULTY_PRIORITY)),
        card.review_count,
    )
