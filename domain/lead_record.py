"""
Domain: Persisted lead record.

A LeadRecord is a stored prospect as seen by duplicate detection. Records are
created by import/enrichment pipelines and are never mutated here; the only
write path is an explicit (soft) delete.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class LeadRecord:
    """
    Stored prospect with the identifying fields used for duplicate matching.

    deleted_at is set when the lead has been moved to the trash.
    """

    id: str
    reg_nr: Optional[str] = None
    chassis_nr: Optional[str] = None
    owner_name: Optional[str] = None
    phone: Optional[str] = None
    deleted_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if self.deleted_at is not None:
            require_utc_timestamp("deleted_at", self.deleted_at)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
