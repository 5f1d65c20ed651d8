"""
Ports (interfaces) for card storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import VocabularyCard


class DeckRepository(ABC):
    """
    Port for loading and saving a deck of vocabulary cards.

    Implementations:
        - YamlDeckRepository: Reads and writes a YAML deck file.
    """

    @abstractmethod
    def load_cards(self) -> list[VocabularyCard]:
        """
        Load every card in the deck, with schedules attached where present.
        """
        pass

    @abstractmethod
    def save_cards(self, cards: list[VocabularyCard]) -> None:
        """
        Persist the given cards, replacing the stored deck.
        """
        pass
