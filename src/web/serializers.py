"""Shared serialization helpers for API routers.

Turns the normalized dataclass records into JSON-safe dicts. Routers should
use these instead of hand-building response dicts.

Usage:
    from src.web.serializers import serialize, serialize_list

    # Single record, all fields
    return serialize(overview)

    # Single record, explicit fields
    return serialize(company, fields=["id", "name", "company_type"])

    # List of records with extra computed fields
    return serialize_list(companies, exclude=["investors"])
"""

import dataclasses
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses, enums and dates to JSON-safe values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k.value if isinstance(k, Enum) else k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def serialize(
    obj: Any,
    fields: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Convert a dataclass record to a JSON-safe dict.

    Args:
        obj: Dataclass instance.
        fields: Whitelist of field names to include. If None, all dataclass fields.
        exclude: Blacklist of field names to skip (only used when fields is None).
        extra: Additional key-value pairs to merge into the result.

    Returns:
        Dict with JSON-safe values (enums → values, dates → ISO strings).
    """
    if fields is None:
        exclude_set = set(exclude or [])
        fields = [f.name for f in dataclasses.fields(obj) if f.name not in exclude_set]

    result = {field: to_jsonable(getattr(obj, field, None)) for field in fields}

    if extra:
        result.update(extra)

    return result


def serialize_list(
    objects: Sequence[Any],
    fields: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    return [serialize(obj, fields=fields, exclude=exclude) for obj in objects]
