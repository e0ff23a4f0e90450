"""
ChallengeService binds configuration, the dataset snapshot provider and the
generator for the callers (daily job, on-demand endpoint).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from treasure_hunt.config import Config
from treasure_hunt.datasets import SnapshotProvider
from treasure_hunt.generator import (
    ChallengeRecord,
    TierThresholds,
    generate_challenge,
    generate_challenge_or_raise,
)
from treasure_hunt.numbering import challenge_number_for_date, random_challenge_number

log = logging.getLogger(__name__)


class ChallengeService:
    def __init__(
        self,
        provider: SnapshotProvider,
        config=Config,
        clock: Callable[[], datetime] | None = None,
    ):
        self.provider = provider
        self.config = config
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.thresholds = TierThresholds(
            easy_min_population=int(config.EASY_MIN_POPULATION),
            medium_min_population=int(config.MEDIUM_MIN_POPULATION),
        )

    def _generator_args(self) -> tuple[tuple[Any, ...], dict[str, Any]]:
        """Positional datasets and keyword options shared by both generate calls."""
        snapshot = self.provider.get()
        datasets = (snapshot.cities, snapshot.countries, snapshot.flag_colors, snapshot.flag_symbols)
        options = {"today": self._clock().date(), "thresholds": self.thresholds}
        return datasets, options

    def generate(self, challenge_number: int) -> ChallengeRecord | None:
        datasets, options = self._generator_args()
        return generate_challenge(challenge_number, *datasets, **options)

    def generate_or_raise(self, challenge_number: int) -> ChallengeRecord:
        datasets, options = self._generator_args()
        return generate_challenge_or_raise(challenge_number, *datasets, **options)

    def today_number(self, now: datetime | None = None) -> int:
        return challenge_number_for_date(
            now or self._clock(),
            self.config.CHALLENGE_START_DATE,
            self.config.CHALLENGE_UTC_OFFSET_HOURS,
        )

    def generate_today(self, now: datetime | None = None) -> ChallengeRecord | None:
        number = self.today_number(now)
        log.info("Generating daily challenge %d.", number)
        return self.generate(number)

    def generate_random(self) -> ChallengeRecord | None:
        number = random_challenge_number(lambda: self._clock().timestamp())
        log.info("Generating on-demand challenge %d.", number)
        return self.generate(number)
