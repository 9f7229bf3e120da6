"""
Tests for `domain/duplicates.py`.

Covers contract rules:
- A check with no criterion enabled raises InvalidCriteria.
- A candidate never matches itself.
- One result per matching field; aggregation counts each duplicate lead once.
- Case-insensitive reg/chassis/name, exact phone, empty values never match.
- Re-running with identical inputs yields identical results.
"""

from __future__ import annotations

from collections import Counter

import pytest

from domain.duplicates import (
    InvalidCriteria,
    MatchCriteria,
    MatchResult,
    MatchType,
    find_duplicates,
    summarize_matches,
)
from domain.lead_record import LeadRecord

ALL = MatchCriteria(match_reg_nr=True, match_chassis=True, match_name=True, match_phone=True)


def test_no_criterion_raises_invalid_criteria() -> None:
    records = [LeadRecord(id="a", reg_nr="ABC123"), LeadRecord(id="b", reg_nr="ABC123")]

    with pytest.raises(InvalidCriteria):
        find_duplicates(records, records, MatchCriteria())


def test_no_criterion_raises_even_for_empty_inputs() -> None:
    with pytest.raises(InvalidCriteria):
        find_duplicates([], [], MatchCriteria())


def test_candidate_never_matches_itself() -> None:
    record = LeadRecord(id="a", reg_nr="ABC123", chassis_nr="YV1", owner_name="Anna", phone="070-1")

    assert find_duplicates([record], [record], ALL) == []


def test_pair_sharing_two_fields_yields_two_results_and_one_duplicate() -> None:
    candidate = LeadRecord(id="a", reg_nr="ABC123", phone="0701234567")
    other = LeadRecord(id="b", reg_nr="abc123", phone="0701234567")
    criteria = MatchCriteria(match_reg_nr=True, match_phone=True)

    matches = find_duplicates([candidate], [candidate, other], criteria)

    assert matches == [
        MatchResult(lead_id="a", matched_against_id="b", match_type=MatchType.REG_NR),
        MatchResult(lead_id="a", matched_against_id="b", match_type=MatchType.PHONE),
    ]
    summary = summarize_matches([candidate], matches)
    assert summary.duplicate_lead_ids == ("a",)
    assert summary.duplicate_count == 1
    assert summary.unique_count == 0
    assert summary.match_counts == {MatchType.REG_NR: 1, MatchType.PHONE: 1}


def test_only_enabled_criteria_are_used() -> None:
    candidate = LeadRecord(id="a", reg_nr="ABC123", phone="0701234567")
    other = LeadRecord(id="b", reg_nr="ABC123", phone="0701234567")

    matches = find_duplicates([candidate], [other], MatchCriteria(match_phone=True))

    assert [m.match_type for m in matches] == [MatchType.PHONE]


def test_name_and_chassis_compare_case_insensitively() -> None:
    candidate = LeadRecord(id="a", chassis_nr="YV1ABC", owner_name="Anna Andersson")
    other = LeadRecord(id="b", chassis_nr="yv1abc", owner_name="ANNA ANDERSSON")

    matches = find_duplicates([candidate], [other], MatchCriteria(match_chassis=True, match_name=True))

    assert [m.match_type for m in matches] == [MatchType.CHASSIS, MatchType.NAME]


def test_name_match_is_exact_not_fuzzy() -> None:
    candidate = LeadRecord(id="a", owner_name="Anna Andersson")
    other = LeadRecord(id="b", owner_name="Anna Anderson")

    assert find_duplicates([candidate], [other], MatchCriteria(match_name=True)) == []


def test_phone_compares_as_stored() -> None:
    candidate = LeadRecord(id="a", phone="070-123 45 67")
    other = LeadRecord(id="b", phone="0701234567")

    assert find_duplicates([candidate], [other], MatchCriteria(match_phone=True)) == []


def test_empty_values_never_match() -> None:
    candidate = LeadRecord(id="a", reg_nr="", owner_name="  ", phone=None)
    other = LeadRecord(id="b", reg_nr="", owner_name="  ", phone=None)

    assert find_duplicates([candidate], [other], ALL) == []


def test_candidate_matches_every_population_record_sharing_the_key() -> None:
    candidate = LeadRecord(id="a", reg_nr="ABC123")
    population = [
        LeadRecord(id="b", reg_nr="ABC123"),
        candidate,
        LeadRecord(id="c", reg_nr="abc123"),
        LeadRecord(id="d", reg_nr="XYZ999"),
    ]

    matches = find_duplicates([candidate], population, MatchCriteria(match_reg_nr=True))

    assert [m.matched_against_id for m in matches] == ["b", "c"]


def test_rerun_yields_identical_results() -> None:
    population = [
        LeadRecord(id="a", reg_nr="ABC123", owner_name="Anna"),
        LeadRecord(id="b", reg_nr="ABC123", owner_name="Bo"),
        LeadRecord(id="c", reg_nr="DEF456", owner_name="anna"),
        LeadRecord(id="d", phone="0701"),
        LeadRecord(id="e", phone="0701"),
    ]

    first = find_duplicates(population, population, ALL)
    second = find_duplicates(population, population, ALL)

    assert Counter(first) == Counter(second)
    assert len(first) == 6


def test_summary_counts_each_duplicate_once() -> None:
    candidates = [
        LeadRecord(id="a", reg_nr="ABC123"),
        LeadRecord(id="b", reg_nr="DEF456"),
        LeadRecord(id="c", reg_nr="GHI789"),
    ]
    population = candidates + [
        LeadRecord(id="x", reg_nr="ABC123"),
        LeadRecord(id="y", reg_nr="abc123"),
    ]

    matches = find_duplicates(candidates, population, MatchCriteria(match_reg_nr=True))
    summary = summarize_matches(candidates, matches)

    assert len(matches) == 2
    assert summary.total_checked == 3
    assert summary.duplicate_count == 1
    assert summary.unique_count == 2
    assert summary.duplicate_lead_ids == ("a",)


def test_summary_ignores_matches_for_leads_outside_the_selection() -> None:
    candidates = [LeadRecord(id="a", reg_nr="ABC123")]
    matches = [
        MatchResult(lead_id="a", matched_against_id="b", match_type=MatchType.REG_NR),
        MatchResult(lead_id="z", matched_against_id="b", match_type=MatchType.PHONE),
    ]

    summary = summarize_matches(candidates, matches)

    assert summary.duplicate_lead_ids == ("a",)
    assert summary.match_counts == {MatchType.REG_NR: 1}
