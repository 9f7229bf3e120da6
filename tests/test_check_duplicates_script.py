"""
Tests for `scripts/check_duplicates.py`.
"""

from __future__ import annotations

import pytest

from domain.lead_record import LeadRecord
from scripts.check_duplicates import build_parser, run


def _records() -> list[LeadRecord]:
    return [
        LeadRecord(id="a", reg_nr="ABC123", phone="0701"),
        LeadRecord(id="b", reg_nr="abc123"),
        LeadRecord(id="c", reg_nr="XYZ999", phone="0701"),
    ]


def _never_called(prompt: str) -> str:
    raise AssertionError("confirmation prompt should not be shown")


@pytest.mark.parametrize("argv", [["a", "b"], ["--all"], ["--all", "--delete"]])
def test_no_criteria_exits_with_usage_error(make_store, capsys, argv) -> None:
    store = make_store(_records())
    args = build_parser().parse_args(argv)

    assert run(args, store, confirm=_never_called) == 2
    assert "at least one" in capsys.readouterr().out
    assert store.list_calls == 0


def test_no_lead_ids_without_all_is_usage_error(make_store) -> None:
    args = build_parser().parse_args(["--reg-nr"])

    assert run(args, make_store(_records()), confirm=_never_called) == 2


def test_report_only_without_delete_flag(make_store, capsys) -> None:
    store = make_store(_records())
    args = build_parser().parse_args(["--all", "--reg-nr", "--phone"])

    assert run(args, store, confirm=_never_called) == 0

    out = capsys.readouterr().out
    assert "Leads checked:" in out
    assert "Registration number: 2" in out
    assert "Phone number: 2" in out
    assert store.delete_calls == []


def test_delete_after_confirmation(make_store, capsys) -> None:
    store = make_store(_records())
    args = build_parser().parse_args(["a", "c", "--reg-nr", "--delete"])

    assert run(args, store, confirm=lambda _: "yes") == 0

    assert store.delete_calls == [["a"]]
    assert store.records["a"].is_deleted
    assert "Moved 1 duplicate leads" in capsys.readouterr().out


def test_delete_aborted_without_yes(make_store) -> None:
    store = make_store(_records())
    args = build_parser().parse_args(["a", "--reg-nr", "--delete"])

    assert run(args, store, confirm=lambda _: "n") == 0
    assert store.delete_calls == []


def test_failed_delete_exits_nonzero(make_store, capsys) -> None:
    store = make_store(_records())
    store.fail_deletes = True
    args = build_parser().parse_args(["a", "--reg-nr", "--delete"])

    assert run(args, store, confirm=lambda _: "yes") == 1
    assert "Error:" in capsys.readouterr().out
