"""
YAML Deck Repository: Infrastructure adapter for a deck file.

Implements DeckRepository over a single YAML document:

    cards:
      - word: ephemeral
        meanings: [short-lived]
        schedule:
          due_date: "2026-10-20T09:00:00+00:00"
          interval: 1
          ease: 250
          ...
"""

import logging
from dataclasses import asdict, fields
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

import yaml  # type: ignore
import yaml.error

from lexirep.domain.errors import DeckFormatError
from lexirep.domain.models import ScheduleState, VocabularyCard
from lexirep.domain.ports import DeckRepository

logger = logging.getLogger(__name__)

_CARD_FIELDS = {f.name for f in fields(VocabularyCard)}
_SCHEDULE_FIELDS = {f.name for f in fields(ScheduleState)}


class YamlDeckRepository(DeckRepository):
    """Loads and saves cards from a YAML deck file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_cards(self) -> list[VocabularyCard]:
        if not self.path.exists():
            raise DeckFormatError(f"Deck file not found: {self.path}")

        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.error.YAMLError as e:
            raise DeckFormatError(f"Invalid YAML in {self.path}: {e}") from e

        if data is None:
            return []
        if not isinstance(data, dict) or not isinstance(data.get("cards", []), list):
            raise DeckFormatError(f"{self.path}: expected a mapping with a 'cards' list")

        cards = [card_from_dict(raw, index) for index, raw in enumerate(data.get("cards") or [])]
        logger.debug(f"Loaded {len(cards)} cards from {self.path}")
        return cards

    def save_cards(self, cards: list[VocabularyCard]) -> None:
        payload = {"cards": [card_to_dict(c) for c in cards]}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(payload, allow_unicode=True, sort_keys=False),
            encoding="utf-8",
        )
        logger.info(f"Saved {len(cards)} cards to {self.path}")


def card_to_dict(card: VocabularyCard) -> dict[str, Any]:
    data = asdict(card)
    data["last_reviewed"] = _format_dt(card.last_reviewed)
    data["added_date"] = _format_dt(card.added_date)
    if card.schedule is not None:
        data["schedule"]["due_date"] = _format_dt(card.schedule.due_date)
    return data


def card_from_dict(raw: Any, index: int = 0) -> VocabularyCard:
    if not isinstance(raw, dict) or not raw.get("word"):
        raise DeckFormatError(f"Card #{index} must be a mapping with a 'word'")

    data = {k: v for k, v in raw.items() if k in _CARD_FIELDS}
    data["last_reviewed"] = _parse_dt(data.get("last_reviewed"), index)
    data["added_date"] = _parse_dt(data.get("added_date"), index)

    schedule = data.get("schedule")
    if schedule is not None:
        if not isinstance(schedule, dict):
            raise DeckFormatError(f"Card #{index}: 'schedule' must be a mapping")
        values = {k: v for k, v in schedule.items() if k in _SCHEDULE_FIELDS}
        try:
            values["due_date"] = _parse_dt(values["due_date"], index)
            if values["due_date"] is None:
                raise ValueError("missing due_date")
            for key in _SCHEDULE_FIELDS - {"due_date"}:
                if key in values:
                    values[key] = int(values[key])
            data["schedule"] = ScheduleState(**values)
        except (KeyError, TypeError, ValueError) as e:
            raise DeckFormatError(f"Card #{index}: invalid schedule ({e})") from e

    return VocabularyCard(**data)


def _format_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(value: Any, index: int) -> datetime | None:
    """Accept ISO strings or YAML timestamps; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as e:
            raise DeckFormatError(f"Card #{index}: invalid date {value!r}") from e
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if not isinstance(value, datetime):
        raise DeckFormatError(f"Card #{index}: invalid date {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
