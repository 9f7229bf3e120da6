"""
Shared FastAPI dependencies.

Overridden in tests via `app.dependency_overrides`.
"""

from domain.owner_classifier import OwnerClassifier
from repositories.lead_repository import SupabaseLeadStore
from services.config import get_settings
from services.dedup_workflow import LeadStore


def get_lead_store() -> LeadStore:
    """Lead store used by the duplicate endpoints."""
    return SupabaseLeadStore()


def get_owner_classifier() -> OwnerClassifier:
    """Classifier configured with the built-in plus configured dealer keywords."""
    return get_settings().owner_classifier()
