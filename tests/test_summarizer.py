"""Tests for the natural-language summarizer."""

from __future__ import annotations

import pytest

from central_reports.models import Connector, SelectionType
from central_reports.selection_store import SelectionStore
from central_reports.summarizer import Summarizer, membership_code


@pytest.fixture
def summarizer() -> Summarizer:
    return Summarizer()


def test_empty_selection_list(summarizer: Summarizer) -> None:
    assert summarizer.summarize([]) == ""


def test_starting_dataset_field(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("Current Members", "All Current Members", SelectionType.FIELD)

    assert summarizer.summarize(store.selections) == "current members"


def test_clause_without_starting_dataset(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("Occupation", "Researcher")

    assert summarizer.summarize(store.selections) == "and occupation is researcher"


def test_full_query(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("Current Members", "All Current Members")
    store.add("Membership Type", "ECY1 - Member Early Career Year 1")
    store.add("Province/State", "BC")

    assert (
        summarizer.summarize(store.selections)
        == "current members that are member type ECY1 from province/state BC"
    )


def test_or_run_is_grouped(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("Current Members", "All Current Members")
    store.add("Occupation", "Researcher")
    second = store.add("Occupation", "Consultant")
    store.update(second.id, connector=Connector.OR)

    assert (
        summarizer.summarize(store.selections)
        == "current members and occupation is researcher or consultant"
    )


def test_and_connector_keeps_clauses_separate(
    summarizer: Summarizer, store: SelectionStore
) -> None:
    store.add("Province/State", "BC")
    store.add("Province/State", "ON")

    assert (
        summarizer.summarize(store.selections)
        == "from province/state BC from province/state ON"
    )


def test_between_pairs_two_values(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("2019 Members", "All 2019 Members")
    store.add("Renewal Month", "December")
    end = store.add("Renewal Month", "January")
    store.update(end.id, connector="BETWEEN")

    assert (
        summarizer.summarize(store.selections)
        == "2019 members who renewed in December and January"
    )


def test_member_year_phrase(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("Member Year", "2021")
    store.add("Tenure", "Past 5 years")

    assert (
        summarizer.summarize(store.selections)
        == "2021 members that have been members for the past 5 years"
    )


def test_degree_and_fallback_templates(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("Degree", "Masters")
    store.add("Career Stage", "Early Career")

    assert (
        summarizer.summarize(store.selections)
        == "with a Degree: Masters with career stage Early Career"
    )


def test_fields_are_not_rendered_as_clauses(
    summarizer: Summarizer, store: SelectionStore
) -> None:
    store.add("Current Members", "All Current Members")
    store.add("Occupation", type=SelectionType.FIELD)

    assert summarizer.summarize(store.selections) == "current members"


def test_register_custom_template(summarizer: Summarizer, store: SelectionStore) -> None:
    summarizer.register("In City", "living in {value}")
    store.add("In City", "Toronto")

    assert summarizer.summarize(store.selections) == "living in Toronto"


def test_fallback_escapes_braces(summarizer: Summarizer) -> None:
    assert summarizer.render_clause("Odd {Name}", ["x"]) == "with odd {name} x"


def test_describe(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("Current Members", "All Current Members")
    store.add("Occupation", "Researcher")
    other = store.add("Occupation", "Consultant")
    store.update(other.id, connector="OR")
    store.add("Member ID", type=SelectionType.FIELD)

    assert (
        summarizer.describe(store.selections)
        == "All Current Members that are Researcher or Consultant, showing Member ID"
    )


def test_describe_fields_only(summarizer: Summarizer, store: SelectionStore) -> None:
    store.add("Member ID", type=SelectionType.FIELD)

    assert summarizer.describe(store.selections) == "All records, showing Member ID"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("ECY1 - Member Early Career Year 1", "ECY1"),
        ("FEL - Fellow", "FEL"),
        ("Custom", "Custom"),
    ],
)
def test_membership_code(value: str, expected: str) -> None:
    assert membership_code(value) == expected
