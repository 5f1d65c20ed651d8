"""
Domain models for vocabulary scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .constants import EASE_SCALE


class Response(str, Enum):
    """Button pressed after recalling a card."""

    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @property
    def quality(self) -> int:
        return QUALITY_SCORES[self]


# SM-2 quality score for each response.
QUALITY_SCORES: dict[Response, int] = {
    Response.HARD: 1,
    Response.GOOD: 2,
    Response.EASY: 3,
}


@dataclass(frozen=True)
class ScheduleState:
    """
    Per-card scheduling record.

    Attributes:
        due_date: When the card next becomes eligible for review.
        interval: Days between the review that produced this state and due_date.
        ease: E-Factor scaled by 100 (250 = 2.50).
        review_count: Total completed reviews.
        lapse_count: Number of Hard responses.
        delayed_days: Days the review was overdue when answered.
        repetition: Consecutive non-Hard responses since the last lapse.
    """

    due_date: datetime
    interval: int
    ease: int
    review_count: int = 0
    lapse_count: int = 0
    delayed_days: int = 0
    repetition: int = 0

    @property
    def efactor(self) -> float:
        return self.ease / EASE_SCALE


@dataclass(frozen=True)
class ReviewResult:
    """Output of a single scheduling calculation."""

    interval: int
    ease: int
    due_date: datetime
    repetition: int

    @property
    def efactor(self) -> float:
        return self.ease / EASE_SCALE


@dataclass(frozen=True)
class IntervalPreview:
    """Hypothetical outcome of one response, for display next to its button."""

    interval: int
    display_text: str
    efactor: float
    repetition: int


@dataclass
class VocabularyCard:
    """
    A flashcard for one word.

    `schedule` is None until the card has been reviewed at least once.
    """

    word: str
    pronunciation: str = ""
    meanings: list[str] = field(default_factory=list)
    similar_words: list[str] = field(default_factory=list)
    examples: list[dict[str, Any]] = field(default_factory=list)
    review_count: int = 0
    difficulty: str = "none"  # "none" or a Response value
    last_reviewed: datetime | None = None
    added_date: datetime | None = None
    book_id: str = ""
    schedule: ScheduleState | None = None


@dataclass
class ReviewSession:
    """Progress record of one review session."""

    session_id: str
    start_time: datetime
    cards_reviewed: int
    total_cards: int
    completed_cards: list[VocabularyCard] = field(default_factory=list)
    current_card: VocabularyCard | None = None
    remaining_cards: list[VocabularyCard] = field(default_factory=list)

    @property
    def progress(self) -> int:
        """Percent of the session completed (0-100)."""
        if self.total_cards == 0:
            return 100
        return round(self.cards_reviewed / self.total_cards * 100)
