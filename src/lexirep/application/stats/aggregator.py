"""
Collection statistics for scheduled vocabulary cards.

This is a pure computation module with no I/O.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from lexirep.application.scheduler.sm2 import round_half_up, utcnow
from lexirep.domain.constants import (
    DEFAULT_MAX_NEW_PER_DAY,
    DEFAULT_MAX_REVIEW_PER_DAY,
    EASE_SCALE,
    MATURE_INTERVAL_DAYS,
)
from lexirep.domain.models import VocabularyCard

EFACTOR_BUCKETS = ["1.3-1.5", "1.5-2.0", "2.0-2.5", "2.5-3.0", "3.0-3.5", "3.5+"]
INTERVAL_BUCKETS = [
    "1 day",
    "2-6 days",
    "7-20 days",
    "21-60 days",
    "2-6 months",
    "6-12 months",
    "1+ years",
]


@dataclass
class CollectionStats:
    total: int
    new: int
    learning: int
    mature: int
    average_ease: int  # E-Factor x 100, over scheduled cards only
    average_interval: int


@dataclass
class DailyLoad:
    new_cards: int
    review_cards: int

    @property
    def total(self) -> int:
        return self.new_cards + self.review_cards


@dataclass
class Sm2Breakdown:
    """
    Distribution of SM-2 state across a collection.

    Buckets are (label, count) pairs in canonical order; empty buckets are
    omitted.
    """

    total: int = 0
    new: int = 0
    learning: int = 0
    mature: int = 0
    repetitions: dict[str, int] = field(
        default_factory=lambda: {"rep0": 0, "rep1": 0, "rep2": 0, "rep3_plus": 0}
    )
    average_efactor: float = 0.0
    average_interval: int = 0
    efactor_distribution: list[tuple[str, int]] = field(default_factory=list)
    interval_distribution: list[tuple[str, int]] = field(default_factory=list)


# ---------- Due filters ----------


def due_now(cards: list[VocabularyCard], now: datetime | None = None) -> list[VocabularyCard]:
    """Cards never reviewed or whose due date has been reached (inclusive)."""
    now = now or utcnow()
    return [c for c in cards if c.schedule is None or c.schedule.due_date <= now]


def due_within_days(
    cards: list[VocabularyCard], days: int, now: datetime | None = None
) -> int:
    """Number of cards due within the next `days` days. Unscheduled cards always count."""
    horizon = (now or utcnow()) + timedelta(days=days)
    return len(due_now(cards, horizon))


# ---------- Classification ----------


def is_new(card: VocabularyCard) -> bool:
    return card.schedule is None or card.review_count == 0


def new_cards(cards: list[VocabularyCard]) -> list[VocabularyCard]:
    return [c for c in cards if is_new(c)]


def learning_cards(cards: list[VocabularyCard]) -> list[VocabularyCard]:
    return [
        c for c in cards
        if not is_new(c) and c.schedule.interval < MATURE_INTERVAL_DAYS
    ]


def mature_cards(cards: list[VocabularyCard]) -> list[VocabularyCard]:
    return [
        c for c in cards
        if not is_new(c) and c.schedule.interval >= MATURE_INTERVAL_DAYS
    ]


def classify(cards: list[VocabularyCard]) -> CollectionStats:
    """
    Partition cards into new / learning / mature.

    Averages cover every card with a schedule, including scheduled cards
    that count as new because review_count is 0.
    """
    new = learning = mature = 0
    total_ease = total_interval = scheduled = 0

    for card in cards:
        if card.schedule is not None:
            scheduled += 1
            total_ease += card.schedule.ease
            total_interval += card.schedule.interval

        if is_new(card):
            new += 1
        elif card.schedule.interval < MATURE_INTERVAL_DAYS:
            learning += 1
        else:
            mature += 1

    return CollectionStats(
        total=len(cards),
        new=new,
        learning=learning,
        mature=mature,
        average_ease=round_half_up(total_ease / scheduled) if scheduled else 0,
        average_interval=round_half_up(total_interval / scheduled) if scheduled else 0,
    )


def recommended_daily_load(
    cards: list[VocabularyCard],
    max_new: int = DEFAULT_MAX_NEW_PER_DAY,
    max_review: int = DEFAULT_MAX_REVIEW_PER_DAY,
    now: datetime | None = None,
) -> DailyLoad:
    """How many new and due-review cards to surface today."""
    due_count = len(due_now(cards, now))
    recommended_new = min(len(new_cards(cards)), max_new)
    review_budget = min(due_count - recommended_new, max_review)
    return DailyLoad(new_cards=recommended_new, review_cards=max(0, review_budget))


# ---------- SM-2 breakdown ----------


def _efactor_bucket(efactor: float) -> str:
    if efactor < 1.5:
        return "1.3-1.5"
    if efactor < 2.0:
        return "1.5-2.0"
    if efactor < 2.5:
        return "2.0-2.5"
    if efactor < 3.0:
        return "2.5-3.0"
    if efactor < 3.5:
        return "3.0-3.5"
    return "3.5+"


def _interval_bucket(interval: int) -> str:
    if interval <= 1:
        return "1 day"
    if interval <= 6:
        return "2-6 days"
    if interval <= 20:
        return "7-20 days"
    if interval <= 60:
        return "21-60 days"
    if interval <= 180:
        return "2-6 months"
    if interval <= 365:
        return "6-12 months"
    return "1+ years"


def sm2_breakdown(cards: list[VocabularyCard]) -> Sm2Breakdown:
    stats = Sm2Breakdown(total=len(cards))
    efactors: Counter[str] = Counter()
    intervals: Counter[str] = Counter()
    total_efactor = 0.0
    total_interval = 0
    scheduled = 0

    for card in cards:
        schedule = card.schedule
        if schedule is None:
            stats.new += 1
            stats.repetitions["rep0"] += 1
            continue

        scheduled += 1
        efactor = schedule.ease / EASE_SCALE
        total_efactor += efactor
        total_interval += schedule.interval

        if schedule.repetition >= 3:
            stats.repetitions["rep3_plus"] += 1
        elif schedule.repetition in (1, 2):
            stats.repetitions[f"rep{schedule.repetition}"] += 1
        else:
            stats.repetitions["rep0"] += 1

        if schedule.interval >= MATURE_INTERVAL_DAYS:
            stats.mature += 1
        else:
            stats.learning += 1

        efactors[_efactor_bucket(efactor)] += 1
        intervals[_interval_bucket(schedule.interval)] += 1

    if scheduled:
        stats.average_efactor = round(total_efactor / scheduled, 2)
        stats.average_interval = round_half_up(total_interval / scheduled)

    stats.efactor_distribution = [(b, efactors[b]) for b in EFACTOR_BUCKETS if efactors[b]]
    stats.interval_distribution = [(b, intervals[b]) for b in INTERVAL_BUCKETS if intervals[b]]
    return stats
