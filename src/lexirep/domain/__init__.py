# Domain Package
from .errors import (
    ConfigurationError,
    DeckFormatError,
    InvalidSessionStateError,
    LexirepError,
)
from .models import (
    QUALITY_SCORES,
    IntervalPreview,
    Response,
    ReviewResult,
    ReviewSession,
    ScheduleState,
    VocabularyCard,
)
from .ports import DeckRepository

__all__ = [
    "QUALITY_SCORES",
    "IntervalPreview",
    "Response",
    "ReviewResult",
    "ReviewSession",
    "ScheduleState",
    "VocabularyCard",
    "LexirepError",
    "InvalidSessionStateError",
    "ConfigurationError",
    "DeckFormatError",
    "DeckRepository",
]
