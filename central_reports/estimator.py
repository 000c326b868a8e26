"""Mock record-count estimation.

The numbers produced here are placeholders for the builder's "estimated
records" badge and filter waterfall. They are not derived from data; wire a
:class:`~central_reports.count_client.RecordCountClient` in when real counts
are available.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Iterable, List, Optional, Protocol, Sequence

from .catalog import ValueCatalog
from .models import Selection

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_COUNT = 7100
DEFAULT_MIN_COUNT = 50
DEFAULT_DECAY_LOW = 0.3
DEFAULT_DECAY_HIGH = 0.7


class RecordCounter(Protocol):
    """Anything that can turn selections into a record count."""

    def estimate(self, selections: Sequence[Selection]) -> int:
        ...


class RecordCountEstimator:
    """Shrink a base count once per active filter.

    Without a ``seed`` each filter multiplies the running total by the
    midpoint of ``[decay_low, decay_high)``. With a ``seed`` the factors are
    drawn uniformly from that interval by a generator restarted from the seed
    on every call. Either way the same selections always give the same count,
    and appending a filter never raises it.
    """

    def __init__(
        self,
        base_count: int = DEFAULT_BASE_COUNT,
        min_count: int = DEFAULT_MIN_COUNT,
        decay_low: float = DEFAULT_DECAY_LOW,
        decay_high: float = DEFAULT_DECAY_HIGH,
        seed: Optional[int] = None,
    ) -> None:
        if not 0 < decay_low <= decay_high <= 1:
            raise ValueError("Decay bounds must satisfy 0 < low <= high <= 1.")
        self.base_count = base_count
        self.min_count = min_count
        self.decay_low = decay_low
        self.decay_high = decay_high
        self.seed = seed

    def estimate(self, selections: Sequence[Selection]) -> int:
        """Return the estimated record count for ``selections``."""
        return self.waterfall(selections)[-1]

    def waterfall(self, selections: Sequence[Selection]) -> List[int]:
        """Return running totals: the base count, then one entry per filter."""
        rng = random.Random(self.seed) if self.seed is not None else None
        total = self.base_count
        totals = [total]
        for _ in _active_filters(selections):
            shrunk = max(self.min_count, math.floor(total * self._factor(rng)))
            total = min(total, shrunk)
            totals.append(total)
        return totals

    def _factor(self, rng: Optional[random.Random]) -> float:
        if rng is None:
            return (self.decay_low + self.decay_high) / 2
        return self.decay_low + rng.random() * (self.decay_high - self.decay_low)


def _active_filters(selections: Iterable[Selection]) -> List[Selection]:
    return [selection for selection in selections if selection.is_filter]


def value_count(category: str, value: str) -> int:
    """Return the illustrative record count shown next to a sample value."""
    checksum = sum(ord(char) for char in category + value)
    return 300 + checksum % 3000


def category_total(catalog: ValueCatalog, category: str) -> int:
    return sum(value_count(category, value) for value in catalog.values_for(category))


def value_share(catalog: ValueCatalog, category: str, value: str) -> float:
    """Return the percentage of a category's total held by one value."""
    total = category_total(catalog, category)
    if not total:
        return 0.0
    return round(value_count(category, value) / total * 100, 1)
