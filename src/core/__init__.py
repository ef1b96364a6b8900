"""
Core Module - Shared Infrastructure.
"""

from src.core.config import settings, Settings
from src.core.database import Base, get_db, get_async_db
from src.core.models import CompanyType, COMPANY_TYPE_LABELS, OWNERSHIP_TYPE_IDS

__all__ = [
    "settings",
    "Settings",
    "Base",
    "get_db",
    "get_async_db",
    "CompanyType",
    "COMPANY_TYPE_LABELS",
    "OWNERSHIP_TYPE_IDS",
]
