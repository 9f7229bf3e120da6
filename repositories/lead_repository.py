"""
Lead repository (persistence).

This module provides *only* persistence operations for LeadRecord.
No business rules (duplicate matching, classification) belong here.

Deleting a lead moves it to the trash by setting `deleted_at`; restoring
clears it. Active leads are those with `deleted_at` IS NULL.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Sequence

from domain.lead_record import LeadRecord
from repositories.client import get_supabase
from services.config import get_settings

# Supabase returns at most this many rows per request.
_PAGE_SIZE: int = 1000

_LEAD_COLUMNS: str = "id, reg_nr, chassis_nr, owner_name, phone, deleted_at"


def _parse_utc_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        # Python's fromisoformat doesn't consistently accept 'Z' across versions.
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    # A naive timestamp from the backend is interpreted as UTC.
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _row_to_lead_record(row: Mapping[str, Any]) -> LeadRecord:
    """Convert a Supabase row into a LeadRecord."""

    def get_optional(key: str) -> str | None:
        value = row.get(key)
        return str(value) if value not in (None, "") else None

    return LeadRecord(
        id=str(row["id"]),
        reg_nr=get_optional("reg_nr"),
        chassis_nr=get_optional("chassis_nr"),
        owner_name=get_optional("owner_name"),
        phone=get_optional("phone"),
        deleted_at=_parse_utc_datetime(row.get("deleted_at")),
    )


def _raise_on_error(response: Any, action: str) -> None:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")


class SupabaseLeadStore:
    """
    Lead store backed by a Supabase table.

    Args:
        client_factory: Returns the Supabase client; defaults to the shared client.
        table: Table name; defaults to the LEADS_TABLE setting.
    """

    def __init__(
        self,
        client_factory: Callable[[], Any] = get_supabase,
        table: Optional[str] = None,
    ):
        self._client_factory = client_factory
        self._table = table or get_settings().leads_table

    def list_active_leads(self) -> List[LeadRecord]:
        """Fetch every lead not in the trash, paging through the table."""

        client = self._client_factory()
        records: List[LeadRecord] = []
        offset = 0
        while True:
            response = (
                client.table(self._table)
                .select(_LEAD_COLUMNS)
                .is_("deleted_at", "null")
                .order("id")
                .range(offset, offset + _PAGE_SIZE - 1)
                .execute()
            )
            _raise_on_error(response, "list leads")

            rows = getattr(response, "data", None) or []
            records.extend(_row_to_lead_record(row) for row in rows)
            if len(rows) < _PAGE_SIZE:
                break
            offset += len(rows)
        return records

    def delete_leads(self, lead_ids: Sequence[str]) -> int:
        """
        Move leads to the trash.

        Returns:
            Number of leads moved.

        Raises:
            RuntimeError if Supabase returns an error response.
        """

        if not lead_ids:
            return 0
        deleted_at = datetime.now(timezone.utc).isoformat()
        response = (
            self._client_factory()
            .table(self._table)
            .update({"deleted_at": deleted_at})
            .in_("id", list(lead_ids))
            .is_("deleted_at", "null")
            .execute()
        )
        _raise_on_error(response, f"delete {len(lead_ids)} leads")
        return len(getattr(response, "data", None) or [])

    def restore_leads(self, lead_ids: Sequence[str]) -> int:
        """Take leads back out of the trash. Returns the number restored."""

        if not lead_ids:
            return 0
        response = (
            self._client_factory()
            .table(self._table)
            .update({"deleted_at": None})
            .in_("id", list(lead_ids))
            .execute()
        )
        _raise_on_error(response, f"restore {len(lead_ids)} leads")
        return len(getattr(response, "data", None) or [])


__all__ = ["SupabaseLeadStore"]
