"""Suggested next steps for the browse screen."""

from __future__ import annotations

from typing import List, Sequence

from .models import Selection, Suggestion, SuggestionSet
from .summarizer import STARTING_DATA_CATEGORIES, YEAR_COHORTS

MAX_SUGGESTIONS = 4


def _s(category: str, section: str, reason: str, icon: str) -> Suggestion:
    return Suggestion(category=category, section=section, reason=reason, icon=icon)


STARTING_SUGGESTIONS = [
    _s("Current Members", "Starting Data", "Most common starting point", "Users"),
    _s("2024 Members", "Starting Data", "Filter by specific year", "Calendar"),
    _s("New Members", "Starting Data", "Recent additions", "UserPlus"),
]

REFINE_SUGGESTIONS = [
    _s("Membership Type", "Membership", "Filter by member type (ECY1, STU1, etc.)", "Crown"),
    _s("Province/State", "Location", "Filter by location", "MapPin"),
    _s("Tenure", "Membership", "Filter by membership duration", "Clock"),
    _s("Occupation", "Demographics", "Filter by occupation", "Briefcase"),
]

MEMBER_TYPE_FOLLOW_UPS = [
    _s("Occupation", "Demographics", "Often combined with member type", "Briefcase"),
    _s("Degree", "Demographics", "Filter by education level", "GraduationCap"),
    _s("Province/State", "Location", "Add location filter", "MapPin"),
]

DEMOGRAPHIC_FOLLOW_UPS = [
    _s("Degree", "Demographics", "Add education requirement", "GraduationCap"),
    _s("Province/State", "Location", "Add location requirement", "MapPin"),
]

LOCATION_FOLLOW_UP = [
    _s("Province/State", "Location", "Complete with location requirement", "MapPin"),
]

RENEWAL_SUGGESTIONS = [
    _s("Renewal Month", "Membership", "Filter by renewal timing", "Calendar"),
    _s("Renewal Year", "Membership", "Filter by renewal year", "Calendar"),
]

FINAL_FALLBACK = [
    _s("Career Stage", "Demographics", "Add career stage filter", "TrendingUp"),
    _s("Workplace Setting", "Demographics", "Add workplace filter", "Building2"),
]

# (category, suggestion, requires starting data)
CORE_FILTERS = [
    ("Tenure", _s("Tenure", "Membership", "Filter by membership duration", "Clock"), True),
    ("Membership Type", _s("Membership Type", "Membership", "Filter by member type", "Crown"), False),
    ("Occupation", _s("Occupation", "Demographics", "Filter by occupation", "Briefcase"), False),
    ("Degree", _s("Degree", "Demographics", "Filter by education", "GraduationCap"), False),
    ("Province/State", _s("Province/State", "Location", "Filter by location", "MapPin"), False),
]

ADDITIONAL_FILTERS = [
    ("Renewal Month", _s("Renewal Month", "Membership", "Filter by renewal timing", "Calendar"), True),
    ("Career Stage", _s("Career Stage", "Demographics", "Filter by career progression", "TrendingUp"), False),
    ("Workplace Setting", _s("Workplace Setting", "Demographics", "Filter by work environment", "Building2"), False),
    ("Education Received", _s("Education Received", "Demographics", "Filter by completed education", "GraduationCap"), False),
    ("Area of Interest", _s("Area of Interest", "Demographics", "Filter by specialization", "Star"), False),
    ("Code of Ethics", _s("Code of Ethics", "Membership", "Filter by ethics compliance", "Award"), False),
    ("Primary Reason for Joining", _s("Primary Reason for Joining", "Membership", "Filter by motivation", "Target"), False),
]


def suggest(selections: Sequence[Selection]) -> SuggestionSet:
    """Return suggestions for the next category to add.

    Every selection counts, whether it was added as a field or a filter.
    """
    if not selections:
        return SuggestionSet(title="Start building your query", suggestions=STARTING_SUGGESTIONS)

    used = {selection.category for selection in selections}
    has_starting_data = bool(used & set(STARTING_DATA_CATEGORIES))

    if has_starting_data and len(selections) == 1:
        return SuggestionSet(title="Refine your selection", suggestions=REFINE_SUGGESTIONS)

    has_member_type = "Membership Type" in used
    has_occupation = "Occupation" in used
    has_degree = "Degree" in used
    has_province = "Province/State" in used

    if has_member_type and not has_occupation and not has_degree:
        return SuggestionSet(title="Common next filters", suggestions=MEMBER_TYPE_FOLLOW_UPS)
    if has_occupation and not has_degree and not has_province:
        return SuggestionSet(
            title="Complete your demographic filters", suggestions=DEMOGRAPHIC_FOLLOW_UPS
        )
    if has_degree and not has_province:
        return SuggestionSet(title="Add location filter", suggestions=LOCATION_FOLLOW_UP)

    has_year_cohort = bool(used & set(YEAR_COHORTS))
    if has_year_cohort and "Renewal Month" not in used and len(selections) <= 2:
        return SuggestionSet(title="Analyze renewal patterns", suggestions=RENEWAL_SUGGESTIONS)

    remaining = _unused(CORE_FILTERS, used, has_starting_data)
    if remaining:
        return SuggestionSet(
            title="Additional filters you can add",
            suggestions=remaining[:MAX_SUGGESTIONS],
        )

    additional = _unused(ADDITIONAL_FILTERS, used, has_starting_data)
    if additional:
        return SuggestionSet(
            title="Refine further with these filters",
            suggestions=additional[:MAX_SUGGESTIONS],
        )
    return SuggestionSet(title="All common filters applied!", suggestions=FINAL_FALLBACK)


def _unused(candidates, used, has_starting_data: bool) -> List[Suggestion]:
    return [
        suggestion
        for category, suggestion, needs_start in candidates
        if category not in used and (has_starting_data or not needs_start)
    ]
