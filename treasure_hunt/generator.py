"""
Challenge generator: seeded city selection and the five treasure-hunt clues.

Pure: no I/O, no module-level randomness. Every draw comes from a
``random.Random`` seeded with the challenge number's decimal string, in this
order: tier, city, clue 1 (latitude or longitude), flag symbol (only when the
flag-symbols table is consulted).
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Sequence

from treasure_hunt.datasets import (
    City,
    Country,
    FlagTable,
    as_city,
    as_country,
    find_country,
    normalize_flag_table,
)

log = logging.getLogger(__name__)

EASY = "Easy"
MEDIUM = "Medium"
HARD = "Hard"
LEVELS = (EASY, MEDIUM, HARD)

CLUE_COUNT = 5


class ChallengeGenerationError(Exception):
    """No challenge could be produced from the given datasets."""


class EmptyTierError(ChallengeGenerationError):
    pass


class NoValidLocationError(ChallengeGenerationError):
    pass


@dataclass(frozen=True)
class TierThresholds:
    easy_min_population: int = 5_000_000
    medium_min_population: int = 1_000_000

    def level_for(self, population: int) -> str:
        if population > self.easy_min_population:
            return EASY
        if population > self.medium_min_population:
            return MEDIUM
        return HARD


DEFAULT_THRESHOLDS = TierThresholds()


@dataclass(frozen=True)
class ChallengeRecord:
    id: int
    date: str
    level: str
    answer: str
    answer_length: int
    clues: tuple[str, ...]
    fact: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["clues"] = list(self.clues)
        return data


def seed_for(challenge_number: int) -> str:
    return str(challenge_number)


def answer_length(answer: str) -> int:
    return len(re.sub(r"[^A-Za-z]", "", answer))


def partition_tiers(
    cities: Iterable[City],
    thresholds: TierThresholds = DEFAULT_THRESHOLDS,
) -> dict[str, list[City]]:
    """Split cities into Easy/Medium/Hard by population. Cities without a name or population are left out."""
    tiers: dict[str, list[City]] = {level: [] for level in LEVELS}
    for city in cities:
        if not city.name or city.population is None:
            continue
        tiers[thresholds.level_for(city.population)].append(city)
    return tiers


def _pick_city(tier: Sequence[City], level: str, rng: random.Random) -> City:
    if not tier:
        raise EmptyTierError(f"No locations found for level {level}")

    index = rng.randrange(len(tier))
    for _ in range(len(tier)):
        city = tier[index]
        if city.has_coordinates:
            return city
        index = (index + 1) % len(tier)

    raise NoValidLocationError(f"Could not find a valid location in level {level}")


# ── Clues ───────────────────────────────────────────────────────────────────

def format_degrees(value: float) -> str:
    """One decimal, ties rounded away from zero on the exact binary value."""
    return str(Decimal(abs(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def position_clue(city: City, rng: random.Random) -> str:
    if rng.random() < 0.5:
        lat = city.latitude
        direction = "north" if lat >= 0 else "south"
        return f"Sail to the {format_degrees(lat)}° {direction}."
    lng = city.longitude
    direction = "east" if lng >= 0 else "west"
    return f"Head towards {format_degrees(lng)}° {direction}."


def compass_clue(city: City) -> str:
    lat, lng = city.latitude, city.longitude
    if lat >= 45:
        return "Your treasure lies in the cold northern realms."
    if lat <= -45:
        return "Your treasure lies in the icy southern lands."
    if lng >= 90 or lng <= -90:
        return "Your treasure lies in the far east or west."
    return "Your treasure lies somewhere in the temperate zones."


def borders_clue(country: Country | None) -> str:
    if country and country.borders:
        return f"The land you're seeking is surrounded by {len(country.borders)} neighboring lands."
    return "The land you seek stands alone with no neighboring countries."


def flag_clue(
    country: Country | None,
    flag_colors: FlagTable,
    flag_symbols: FlagTable,
    rng: random.Random,
) -> str:
    if country and country.common_name:
        colors = flag_colors.get(country.common_name) or ()
        if colors:
            return f"Hoist the flag with colors of {', '.join(colors)}."
        symbols = flag_symbols.get(country.common_name) or ()
        if symbols:
            return f"Look for the flag bearing the {rng.choice(list(symbols))}."
    return "The flag bears unique symbols known to the locals."


def language_clue(country: Country | None) -> str:
    language = country.first_language if country else None
    if language:
        return f"The local tongue traces back to the {language} language family."
    return "The local tongue holds ancient secrets."


def build_clues(
    city: City,
    country: Country | None,
    flag_colors: FlagTable,
    flag_symbols: FlagTable,
    rng: random.Random,
) -> tuple[str, ...]:
    return (
        position_clue(city, rng),
        compass_clue(city),
        borders_clue(country),
        flag_clue(country, flag_colors, flag_symbols, rng),
        language_clue(country),
    )


# ── Entry point ─────────────────────────────────────────────────────────────

def generate_challenge(
    challenge_number: int,
    cities: Iterable[City | Mapping[str, Any]],
    countries: Iterable[Country | Mapping[str, Any]],
    flag_colors: Mapping[str, Any] | None = None,
    flag_symbols: Mapping[str, Any] | None = None,
    *,
    today: date | None = None,
    thresholds: TierThresholds = DEFAULT_THRESHOLDS,
) -> ChallengeRecord | None:
    """
    Build the challenge for *challenge_number*.

    Returns None when the drawn tier is empty or has no city with
    coordinates. Same number and same datasets give the same record
    (``today`` aside, which defaults to the current UTC date).
    """
    try:
        return _generate(
            challenge_number,
            cities,
            countries,
            flag_colors,
            flag_symbols,
            today=today,
            thresholds=thresholds,
        )
    except ChallengeGenerationError as exc:
        log.error("Challenge %s not generated: %s", challenge_number, exc)
        return None


def generate_challenge_or_raise(
    challenge_number: int,
    cities: Iterable[City | Mapping[str, Any]],
    countries: Iterable[Country | Mapping[str, Any]],
    flag_colors: Mapping[str, Any] | None = None,
    flag_symbols: Mapping[str, Any] | None = None,
    *,
    today: date | None = None,
    thresholds: TierThresholds = DEFAULT_THRESHOLDS,
) -> ChallengeRecord:
    """Same as ``generate_challenge`` but raises ChallengeGenerationError instead of returning None."""
    return _generate(
        challenge_number,
        cities,
        countries,
        flag_colors,
        flag_symbols,
        today=today,
        thresholds=thresholds,
    )


def _generate(
    challenge_number: int,
    cities: Iterable[City | Mapping[str, Any]],
    countries: Iterable[Country | Mapping[str, Any]],
    flag_colors: Mapping[str, Any] | None,
    flag_symbols: Mapping[str, Any] | None,
    *,
    today: date | None,
    thresholds: TierThresholds,
) -> ChallengeRecord:
    seed = seed_for(challenge_number)
    rng = random.Random(seed)

    tiers = partition_tiers((as_city(c) for c in cities), thresholds)
    level = LEVELS[rng.randrange(len(LEVELS))]
    city = _pick_city(tiers[level], level, rng)

    country = find_country((as_country(c) for c in countries), city.country)
    if country is None:
        log.debug("No country record for %r; country clues fall back.", city.country)

    clues = build_clues(
        city,
        country,
        normalize_flag_table(flag_colors),
        normalize_flag_table(flag_symbols),
        rng,
    )
    created = today or datetime.now(timezone.utc).date()

    record = ChallengeRecord(
        id=int(seed, 10),
        date=created.isoformat(),
        level=level,
        answer=city.name,
        answer_length=answer_length(city.name),
        clues=clues,
        fact=f"👑 The treasure is located in the city of {city.name} in {city.country}.",
    )
    log.debug("Challenge %s generated: level=%s answer=%s", record.id, record.level, record.answer)
    return record
