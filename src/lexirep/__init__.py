"""lexirep: spaced-repetition scheduling for vocabulary flashcards."""

from lexirep.consts import VERSION

__version__ = VERSION
