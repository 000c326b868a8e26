"""Tests for the mock record-count estimator."""

from __future__ import annotations

import pytest

from central_reports.catalog import ValueCatalog
from central_reports.estimator import (
    RecordCountEstimator,
    category_total,
    value_count,
    value_share,
)
from central_reports.models import Selection, SelectionType
from central_reports.selection_store import SelectionStore


def _filters(count: int) -> SelectionStore:
    store = SelectionStore()
    for index in range(count):
        store.add("Occupation", f"Value {index}")
    return store


def test_no_filters_returns_base_count(estimator: RecordCountEstimator) -> None:
    assert estimator.estimate([]) == 7100


def test_fields_do_not_shrink_the_count(estimator: RecordCountEstimator) -> None:
    store = SelectionStore()
    store.add("Member ID", type=SelectionType.FIELD)
    store.add("Occupation", type=SelectionType.FIELD)

    assert estimator.estimate(store.selections) == 7100


def test_midpoint_waterfall_is_deterministic(estimator: RecordCountEstimator) -> None:
    totals = estimator.waterfall(_filters(3).selections)

    assert totals == [7100, 3550, 1775, 887]


def test_count_is_clamped_to_minimum(estimator: RecordCountEstimator) -> None:
    assert estimator.estimate(_filters(12).selections) == 50


def test_appending_filters_never_increases_count() -> None:
    estimator = RecordCountEstimator(seed=7)
    store = SelectionStore()
    previous = estimator.estimate(store.selections)

    for index in range(15):
        store.add("Degree", f"Value {index}")
        current = estimator.estimate(store.selections)
        assert current <= previous
        assert current >= 50
        previous = current


def test_seeded_estimates_repeat() -> None:
    selections = _filters(4).selections

    first = RecordCountEstimator(seed=11).estimate(selections)
    second = RecordCountEstimator(seed=11).estimate(selections)

    assert first == second


def test_seeded_factor_stays_within_bounds() -> None:
    estimator = RecordCountEstimator(seed=3)

    totals = estimator.waterfall(_filters(1).selections)

    assert 0.3 * 7100 - 1 <= totals[1] < 0.7 * 7100


def test_seeded_estimate_matches_last_waterfall_step() -> None:
    estimator = RecordCountEstimator(seed=11)
    selections = _filters(4).selections

    waterfall = estimator.waterfall(selections)

    assert estimator.estimate(selections) == waterfall[-1]
    assert estimator.waterfall(selections) == waterfall
    assert waterfall == sorted(waterfall, reverse=True)


def test_seeded_waterfall_prefixes_agree() -> None:
    estimator = RecordCountEstimator(seed=5)
    selections = _filters(5).selections

    full = estimator.waterfall(selections)

    assert estimator.waterfall(selections[:3]) == full[:4]


def test_base_below_minimum_is_not_raised() -> None:
    estimator = RecordCountEstimator(base_count=20)

    assert estimator.estimate(_filters(2).selections) == 20


@pytest.mark.parametrize("low, high", [(0.0, 0.5), (0.8, 0.2), (0.5, 1.5)])
def test_invalid_decay_bounds(low: float, high: float) -> None:
    with pytest.raises(ValueError):
        RecordCountEstimator(decay_low=low, decay_high=high)


def test_fields_do_not_shrink_mixed_selections(estimator: RecordCountEstimator) -> None:
    selections = [
        Selection(id=1, category="Member ID", value="All Values", type=SelectionType.FIELD),
        Selection(id=2, category="Occupation", value="Researcher"),
    ]

    assert estimator.estimate(selections) == 3550


def test_value_count_is_stable() -> None:
    count = value_count("Occupation", "Researcher")

    assert count == value_count("Occupation", "Researcher")
    assert 300 <= count < 3300


def test_value_share_sums_to_roughly_100(catalog: ValueCatalog) -> None:
    shares = [value_share(catalog, "Degree", value) for value in catalog.values_for("Degree")]

    assert category_total(catalog, "Degree") > 0
    assert sum(shares) == pytest.approx(100, abs=0.5)


def test_value_share_of_unknown_category(catalog: ValueCatalog) -> None:
    assert value_share(catalog, "Nope", "Nothing") == 0.0
