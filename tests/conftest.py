"""
Pytest configuration.

Adds the project root to the Python path so that tests can import the domain,
services, repositories and api packages, and provides an in-memory lead store.
"""

import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Sequence

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.lead_record import LeadRecord  # noqa: E402


class InMemoryLeadStore:
    """LeadStore fake keeping records in a dict; can be told to fail deletes."""

    def __init__(self, records: Sequence[LeadRecord] = ()):
        self.records: Dict[str, LeadRecord] = {r.id: r for r in records}
        self.fail_deletes = False
        self.delete_calls: List[List[str]] = []
        self.list_calls = 0

    def list_active_leads(self) -> List[LeadRecord]:
        self.list_calls += 1
        return [r for r in self.records.values() if not r.is_deleted]

    def delete_leads(self, lead_ids: Sequence[str]) -> int:
        self.delete_calls.append(list(lead_ids))
        if self.fail_deletes:
            raise RuntimeError("connection reset")
        now = datetime.now(timezone.utc)
        deleted = 0
        for lead_id in lead_ids:
            record = self.records.get(lead_id)
            if record is not None and not record.is_deleted:
                self.records[lead_id] = replace(record, deleted_at=now)
                deleted += 1
        return deleted

    def restore_leads(self, lead_ids: Sequence[str]) -> int:
        restored = 0
        for lead_id in lead_ids:
            record = self.records.get(lead_id)
            if record is not None and record.is_deleted:
                self.records[lead_id] = replace(record, deleted_at=None)
                restored += 1
        return restored


@pytest.fixture
def make_store():
    return InMemoryLeadStore
