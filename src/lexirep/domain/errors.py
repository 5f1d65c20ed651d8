"""Exception hierarchy for lexirep."""


class LexirepError(Exception):
    """Base class for all lexirep errors."""


class InvalidSessionStateError(LexirepError):
    """Raised when a review is processed without an active session."""

    def __init__(self, message: str = "No active review session"):
        super().__init__(message)


class ConfigurationError(LexirepError):
    """Raised when SRS settings fail validation at load time."""


class DeckFormatError(LexirepError):
    """Raised when a deck file cannot be parsed into cards."""
