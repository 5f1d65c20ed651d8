"""
SM-2 spaced repetition scheduler.

Computes the next ScheduleState-relevant values for a card from a review
response and the card's prior schedule. Stateless apart from settings and the
load-balancing histogram it owns.
"""

import logging
import math
from datetime import datetime, timedelta, timezone

from lexirep.application.config import SrsSettings, resolve_config
from lexirep.domain.constants import (
    EASE_SCALE,
    FIRST_INTERVAL,
    SECOND_INTERVAL,
)
from lexirep.domain.models import (
    IntervalPreview,
    Response,
    ReviewResult,
    ScheduleState,
)

from .load_balancer import LoadBalancer

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def ease_floor(minimum_efactor: float) -> int:
    """Smallest stored ease that does not fall below the E-Factor floor."""
    # round() first so 1.3 * 100 does not ceil to 131
    return math.ceil(round(minimum_efactor * EASE_SCALE, 6))


def ease_delta(quality: int) -> float:
    """Canonical SM-2 E-Factor adjustment for a 1-3 quality score."""
    miss = 3 - quality
    return 0.1 - miss * (0.08 + miss * 0.02)


def format_interval(days: int) -> str:
    """Human-readable interval, e.g. '6 days' or '1.5 months'."""
    if days < 1:
        return "today"
    if days == 1:
        return "1 day"
    if days < 30:
        return f"{days} days"
    if days < 365:
        months = round(days / 30, 1)
        return f"{months:g} month{'s' if months > 1 else ''}"
    years = round(days / 365, 1)
    return f"{years:g} year{'s' if years > 1 else ''}"


class SM2Scheduler:
    """
    SM-2 (SuperMemo 2) scheduler with review load balancing.

    Quality scores are 1 (Hard), 2 (Good) and 3 (Easy). One instance per
    review stream: the load balancer histogram is per instance.
    """

    def __init__(
        self,
        settings: SrsSettings | None = None,
        balancer: LoadBalancer | None = None,
    ):
        self._settings = settings or resolve_config()
        self._balancer = balancer or self._make_balancer(self._settings)

    @staticmethod
    def _make_balancer(settings: SrsSettings) -> LoadBalancer:
        return LoadBalancer(
            enabled=settings.load_balance,
            max_fuzzing_days=settings.max_fuzzing_days,
            maximum_interval=settings.maximum_interval,
        )

    @property
    def settings(self) -> SrsSettings:
        return self._settings

    @property
    def balancer(self) -> LoadBalancer:
        return self._balancer

    def schedule(
        self,
        response: Response,
        prior: ScheduleState | None = None,
        now: datetime | None = None,
    ) -> ReviewResult:
        """
        Calculate the next schedule for a review response.

        Args:
            response: Hard, Good or Easy.
            prior: The card's current schedule, or None for a new card.
            now: Review time; defaults to the current UTC time.

        Returns:
            ReviewResult with the balanced interval, new ease and due date.
        """
        return self._schedule(response, prior, now or utcnow(), self._balancer)

    def preview(
        self,
        prior: ScheduleState | None = None,
        now: datetime | None = None,
    ) -> dict[Response, IntervalPreview]:
        """
        Hypothetical results for every response.

        Runs against a copy of the histogram, so previews never bias the
        intervals later assigned by schedule().
        """
        now = now or utcnow()
        scratch = self._balancer.clone()
        previews: dict[Response, IntervalPreview] = {}
        for response in Response:
            result = self._schedule(response, prior, now, scratch)
            previews[response] = IntervalPreview(
                interval=result.interval,
                display_text=format_interval(result.interval),
                efactor=result.efactor,
                repetition=result.repetition,
            )
        return previews

    def _schedule(
        self,
        response: Response,
        prior: ScheduleState | None,
        now: datetime,
        balancer: LoadBalancer,
    ) -> ReviewResult:
        s = self._settings
        if prior is None:
            prior = ScheduleState(
                due_date=now,
                interval=0,
                ease=round_half_up(s.initial_efactor * EASE_SCALE),
            )

        q = response.quality
        efactor = max(s.minimum_efactor, prior.ease / EASE_SCALE + ease_delta(q))

        if q >= 2:
            repetition = prior.repetition + 1
        else:
            repetition = 0

        if q < 2:
            interval = FIRST_INTERVAL
        elif repetition == 1:
            interval = FIRST_INTERVAL
        elif repetition == 2:
            interval = SECOND_INTERVAL
        else:
            interval = round_half_up(prior.interval * efactor)

        interval = min(max(interval, 1), s.maximum_interval)
        balanced = balancer.balance(interval, now)
        ease = max(round_half_up(efactor * EASE_SCALE), ease_floor(s.minimum_efactor))

        logger.debug(
            f"{response.value}: rep {prior.repetition}->{repetition}, "
            f"interval {prior.interval}->{interval} (balanced {balanced}), EF {efactor:.2f}"
        )

        return ReviewResult(
            interval=balanced,
            ease=ease,
            due_date=now + timedelta(days=balanced),
            repetition=repetition,
        )

    def update_settings(self, **overrides) -> SrsSettings:
        """Apply setting overrides; the histogram is kept."""
        merged = {**self._settings.model_dump(), **overrides}
        self._settings = resolve_config(merged)
        self._balancer.enabled = self._settings.load_balance
        self._balancer.max_fuzzing_days = self._settings.max_fuzzing_days
        self._balancer.maximum_interval = self._settings.maximum_interval
        return self._settings

    def clear_histogram(self) -> None:
        self._balancer.clear()
