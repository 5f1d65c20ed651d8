# Application Stats Package
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
from .service import DeckReport, DeckStatsService

__all__ = [
    "CollectionStats",
    "DailyLoad",
    "Sm2Breakdown",
    "classify",
    "due_now",
    "due_within_days",
    "recommended_daily_load",
    "sm2_breakdown",
    "DeckReport",
    "DeckStatsService",
]
