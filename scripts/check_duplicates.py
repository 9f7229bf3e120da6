#!/usr/bin/env python3
"""
Duplicate Lead Check Script

Checks leads in the Supabase database for duplicates and, only after an
interactive confirmation, moves the duplicates to the trash.

Usage:
    python check_duplicates.py --reg-nr lead-id-1 lead-id-2
    python check_duplicates.py --all --reg-nr --phone
    python check_duplicates.py --all --reg-nr --delete
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.duplicates import InvalidCriteria, MatchCriteria, MatchType
from repositories.lead_repository import SupabaseLeadStore
from services.config import configure_logging
from services.dedup_workflow import DedupWorkflow, DeleteFailed, DuplicateReport, LeadStore

MATCH_TYPE_LABELS = {
    MatchType.REG_NR: "Registration number",
    MatchType.CHASSIS: "Chassis number",
    MatchType.NAME: "Owner name",
    MatchType.PHONE: "Phone number",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find (and optionally delete) duplicate leads.")
    parser.add_argument("lead_ids", nargs="*", help="Lead IDs to check")
    parser.add_argument("--all", action="store_true", help="Check every active lead")
    parser.add_argument("--reg-nr", action="store_true", help="Match on registration number")
    parser.add_argument("--chassis", action="store_true", help="Match on chassis number")
    parser.add_argument("--name", action="store_true", help="Match on owner name")
    parser.add_argument("--phone", action="store_true", help="Match on phone number")
    parser.add_argument("--delete", action="store_true", help="Offer to move found duplicates to the trash")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    return parser


def print_report(report: DuplicateReport) -> None:
    print("=" * 50)
    print("DUPLICATE CHECK")
    print("=" * 50)
    print(f"Leads checked:             {report.total_checked}")
    print(f"Unique leads:              {report.unique_count}")
    print(f"Duplicates found:          {report.duplicate_count}")
    if report.missing_ids:
        print(f"Not found (ignored):       {len(report.missing_ids)}")
    print("=" * 50)

    if report.match_counts:
        print("\nMatches per type:")
        print("-" * 50)
        for match_type, count in report.match_counts.items():
            print(f"{MATCH_TYPE_LABELS[match_type]}: {count}")
        print("-" * 50)


def run(
    args: argparse.Namespace,
    store: LeadStore,
    confirm: Callable[[str], str] = input,
) -> int:
    """Run the check; returns a process exit code."""

    criteria = MatchCriteria(
        match_reg_nr=args.reg_nr,
        match_chassis=args.chassis,
        match_name=args.name,
        match_phone=args.phone,
    )
    workflow = DedupWorkflow(store)

    try:
        criteria.validate()
        if args.all:
            population = store.list_active_leads()
            lead_ids: List[str] = [lead.id for lead in population]
            report = workflow.run(lead_ids, population, criteria)
        else:
            if not args.lead_ids:
                print("Error: pass lead IDs or --all")
                return 2
            report = workflow.check_selection(args.lead_ids, criteria)
    except InvalidCriteria:
        print("Error: select at least one of --reg-nr, --chassis, --name, --phone")
        return 2

    print_report(report)

    if not args.delete or not report.has_duplicates:
        return 0

    answer = confirm(f"\nMove {report.duplicate_count} duplicate leads to the trash? Type 'yes' to confirm: ")
    if answer.strip().lower() != "yes":
        print("Aborted. Nothing was deleted.")
        return 0

    try:
        outcome = workflow.confirm_delete(report)
    except DeleteFailed as e:
        print(f"Error: {e}")
        return 1

    print(f"Moved {outcome.deleted} duplicate leads to the trash.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return run(args, SupabaseLeadStore())


if __name__ == "__main__":
    sys.exit(main())
