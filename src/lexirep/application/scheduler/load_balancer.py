"""
Review load balancing.

Shifts a computed interval by a few days towards the calendar date with the
fewest reviews already assigned, so due dates do not pile up on one day.
"""

import logging
from collections import Counter
from datetime import date, datetime, timedelta

from lexirep.domain.constants import (
    DEFAULT_MAX_FUZZING_DAYS,
    DEFAULT_MAXIMUM_INTERVAL,
    LONG_FUZZ_RATIO,
    MEDIUM_FUZZ_RATIO,
    MEDIUM_INTERVAL_LIMIT,
    SHORT_INTERVAL_LIMIT,
)

logger = logging.getLogger(__name__)


class LoadBalancer:
    """
    Histogram of due dates assigned during this instance's lifetime.

    Not persisted; one instance per review stream.
    """

    def __init__(
        self,
        enabled: bool = True,
        max_fuzzing_days: int = DEFAULT_MAX_FUZZING_DAYS,
        maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL,
    ):
        self.enabled = enabled
        self.max_fuzzing_days = max_fuzzing_days
        self.maximum_interval = maximum_interval
        self._histogram: Counter[str] = Counter()

    def fuzz_radius(self, interval: int) -> int:
        """Whole days an interval may move in either direction."""
        if interval <= SHORT_INTERVAL_LIMIT:
            radius = 1.0
        elif interval <= MEDIUM_INTERVAL_LIMIT:
            radius = max(1.0, interval * MEDIUM_FUZZ_RATIO)
        else:
            radius = max(1.0, interval * LONG_FUZZ_RATIO)
        return int(min(radius, self.max_fuzzing_days))

    def balance(self, interval: int, now: datetime) -> int:
        """
        Pick the least loaded interval within the fuzz radius and record it.

        The interval is first clamped to [1, maximum_interval]. Ties go to
        the earliest candidate.
        """
        if not self.enabled:
            return interval

        interval = min(max(interval, 1), self.maximum_interval)
        radius = self.fuzz_radius(interval)
        best_interval = interval
        min_reviews: int | None = None

        for offset in range(-radius, radius + 1):
            candidate = interval + offset
            if candidate < 1 or candidate > self.maximum_interval:
                continue

            reviews = self._histogram[_date_key(now, candidate)]
            if min_reviews is None or reviews < min_reviews:
                min_reviews = reviews
                best_interval = candidate

        self._histogram[_date_key(now, best_interval)] += 1

        if best_interval != interval:
            logger.debug(f"Load balanced interval {interval} -> {best_interval}")
        return best_interval

    def load_on(self, day: date) -> int:
        """Reviews already assigned to a calendar date."""
        return self._histogram[day.isoformat()]

    def clone(self) -> "LoadBalancer":
        """Independent copy, so hypothetical scheduling leaves this histogram untouched."""
        copy = LoadBalancer(self.enabled, self.max_fuzzing_days, self.maximum_interval)
        copy._histogram = self._histogram.copy()
        return copy

    def clear(self) -> None:
        self._histogram.clear()

    def __len__(self) -> int:
        return sum(self._histogram.values())


def _date_key(now: datetime, interval: int) -> str:
    return (now + timedelta(days=interval)).date().isoformat()
