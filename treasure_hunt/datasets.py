"""
Reference datasets for challenge generation.

The generator never fetches anything itself: callers load the world-cities
table, the countries reference data and the two flag tables, turn them into a
``DatasetSnapshot`` and hand that snapshot over. ``SnapshotProvider`` is the
caller-owned cache around a loader function, with a pluggable refresh policy.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence

log = logging.getLogger(__name__)

FlagTable = Mapping[str, Sequence[str]]


def _clean_str(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _parse_float(value: Any) -> float | None:
    raw = _clean_str(value)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _parse_population(value: Any) -> int | None:
    """World-cities exports sometimes carry populations as '12345.0'."""
    number = _parse_float(value)
    if number is None or number != number:  # NaN
        return None
    return int(number)


@dataclass(frozen=True)
class City:
    name: str
    latitude: float | None
    longitude: float | None
    country: str
    population: int | None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "City":
        """Build a City from a world-cities row (city_ascii, lat, lng, country, population)."""
        return cls(
            name=_clean_str(row.get("city_ascii") or row.get("city")),
            latitude=_parse_float(row.get("lat")),
            longitude=_parse_float(row.get("lng")),
            country=_clean_str(row.get("country")),
            population=_parse_population(row.get("population")),
        )


@dataclass(frozen=True)
class Country:
    common_name: str
    borders: tuple[str, ...] = ()
    # (language code, language name), sorted by code so the first entry is stable
    languages: tuple[tuple[str, str], ...] = ()
    flag: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Country":
        """Build a Country from a REST-countries style record."""
        name = record.get("name")
        if isinstance(name, Mapping):
            common_name = _clean_str(name.get("common"))
        else:
            common_name = _clean_str(name)

        raw_borders = record.get("borders") or []
        borders = tuple(_clean_str(b) for b in raw_borders if _clean_str(b)) if isinstance(raw_borders, (list, tuple)) else ()

        raw_languages = record.get("languages") or {}
        languages: tuple[tuple[str, str], ...] = ()
        if isinstance(raw_languages, Mapping):
            languages = tuple(
                sorted(
                    (_clean_str(code), _clean_str(language))
                    for code, language in raw_languages.items()
                    if _clean_str(language)
                )
            )

        flags = record.get("flags")
        if isinstance(flags, Mapping):
            flag = _clean_str(flags.get("png") or flags.get("svg"))
        else:
            flag = _clean_str(record.get("flag"))

        return cls(common_name=common_name, borders=borders, languages=languages, flag=flag)

    @property
    def first_language(self) -> str | None:
        return self.languages[0][1] if self.languages else None


def as_city(value: City | Mapping[str, Any]) -> City:
    return value if isinstance(value, City) else City.from_row(value)


def as_country(value: Country | Mapping[str, Any]) -> Country:
    return value if isinstance(value, Country) else Country.from_record(value)


def eligible_cities(rows: Iterable[City | Mapping[str, Any]]) -> list[City]:
    """Keep only cities with a name, both coordinates and a population."""
    cities = [as_city(row) for row in rows]
    eligible = [
        city for city in cities
        if city.name and city.has_coordinates and city.population is not None
    ]
    log.debug("Kept %d of %d city rows as eligible.", len(eligible), len(cities))
    return eligible


def normalize_flag_table(table: Mapping[str, Any] | None) -> dict[str, tuple[str, ...]]:
    """Country name -> tuple of strings. Entries that are not lists are dropped."""
    normalized: dict[str, tuple[str, ...]] = {}
    for country_name, values in (table or {}).items():
        if not isinstance(values, (list, tuple)):
            continue
        normalized[_clean_str(country_name)] = tuple(_clean_str(v) for v in values if _clean_str(v))
    return normalized


def find_country(countries: Iterable[Country], country_name: str) -> Country | None:
    """Case-insensitive match on the common name. First match wins."""
    wanted = _clean_str(country_name).lower()
    if not wanted:
        return None
    for country in countries:
        if country.common_name.lower() == wanted:
            return country
    return None


@dataclass(frozen=True)
class DatasetSnapshot:
    cities: tuple[City, ...]
    countries: tuple[Country, ...]
    flag_colors: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    flag_symbols: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    loaded_at: float = 0.0

    @classmethod
    def from_raw(
        cls,
        city_rows: Iterable[City | Mapping[str, Any]],
        country_records: Iterable[Country | Mapping[str, Any]],
        flag_colors: Mapping[str, Any] | None = None,
        flag_symbols: Mapping[str, Any] | None = None,
        loaded_at: float | None = None,
    ) -> "DatasetSnapshot":
        return cls(
            cities=tuple(eligible_cities(city_rows)),
            countries=tuple(as_country(record) for record in country_records),
            flag_colors=normalize_flag_table(flag_colors),
            flag_symbols=normalize_flag_table(flag_symbols),
            loaded_at=time.time() if loaded_at is None else loaded_at,
        )

    def find_country(self, country_name: str) -> Country | None:
        return find_country(self.countries, country_name)


# ── Refresh policies ────────────────────────────────────────────────────────

class RefreshPolicy(Protocol):
    def is_stale(self, loaded_at: float, now: float) -> bool: ...


class NeverRefresh:
    """Load once and keep the snapshot for the lifetime of the provider."""

    def is_stale(self, loaded_at: float, now: float) -> bool:
        return False


@dataclass(frozen=True)
class MaxAgeRefresh:
    max_age_seconds: float

    def is_stale(self, loaded_at: float, now: float) -> bool:
        return now - loaded_at >= self.max_age_seconds


def policy_from_config(config) -> RefreshPolicy:
    max_age = int(getattr(config, "DATASET_MAX_AGE_SECONDS", 0) or 0)
    return MaxAgeRefresh(max_age) if max_age > 0 else NeverRefresh()


class SnapshotProvider:
    """
    Caller-owned cache of a ``DatasetSnapshot``.

    ``loader`` returns a fresh snapshot (it is where any network or file
    access lives). ``get()`` reloads when there is no snapshot yet or when the
    policy reports it stale. Age is measured on the provider clock from the
    moment the loader returned, not from ``DatasetSnapshot.loaded_at``. If a
    reload fails while an older snapshot is held, the older one keeps being
    served.
    """

    def __init__(
        self,
        loader: Callable[[], DatasetSnapshot],
        policy: RefreshPolicy | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._loader = loader
        self._policy = policy or NeverRefresh()
        self._clock = clock
        self._snapshot: DatasetSnapshot | None = None
        self._loaded_at = 0.0
        self._lock = Lock()

    def get(self) -> DatasetSnapshot:
        with self._lock:
            now = self._clock()
            if self._snapshot is not None and not self._policy.is_stale(self._loaded_at, now):
                return self._snapshot

            if self._snapshot is None:
                log.info("Loading dataset snapshot.")
                self._snapshot = self._loader()
            else:
                log.info("Dataset snapshot is stale (loaded_at=%.0f); reloading.", self._loaded_at)
                try:
                    self._snapshot = self._loader()
                except Exception:
                    log.exception("Dataset reload failed; keeping previous snapshot.")
                    return self._snapshot

            self._loaded_at = self._clock()
            log.info(
                "Dataset snapshot ready: %d cities, %d countries.",
                len(self._snapshot.cities),
                len(self._snapshot.countries),
            )
            return self._snapshot

    def invalidate(self) -> None:
        with self._lock:
            if self._snapshot is not None:
                log.debug("Dataset snapshot invalidated.")
            self._snapshot = None
