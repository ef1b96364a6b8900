"""
Key resolution over records with drifting field names.

Upstream tables mix ``snake_case``, ``Title_Case``, leading underscores and
the odd typo. Resolution runs two passes over the candidate list:

1. exact key match, candidates in order
2. only if pass 1 found nothing: match on normalized keys (alphanumerics,
   lowercased) so ``Buyer_Investor`` answers for ``buyer_investor``

The exact pass keeps deliberate precedence when several plausible keys are
present on the same record.
"""
import re
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from src.normalization.coercers import Number, coerce_number, to_safe_string

_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)

_MISSING = object()


def normalize_key(key: str) -> str:
    return _NON_ALNUM.sub("", key).lower()


def _normalized_index(record: Mapping[str, Any]) -> Dict[str, str]:
    index: Dict[str, str] = {}
    for key in record:
        if isinstance(key, str):
            # First original key wins on collision
            index.setdefault(normalize_key(key), key)
    return index


def _resolve(
    record: Any,
    candidate_keys: Sequence[str],
    accept: Callable[[Any], bool],
) -> Any:
    if not isinstance(record, Mapping):
        return _MISSING

    for key in candidate_keys:
        if key in record and accept(record[key]):
            return record[key]

    index = _normalized_index(record)
    for key in candidate_keys:
        original = index.get(normalize_key(key))
        if original is not None and accept(record[original]):
            return record[original]

    return _MISSING


def resolve_value(record: Any, candidate_keys: Sequence[str], default: Any = None) -> Any:
    """First present value (``None``, ``0`` and ``""`` count as present)."""
    value = _resolve(record, candidate_keys, lambda v: True)
    return default if value is _MISSING else value


def coalesce(record: Any, candidate_keys: Sequence[str], default: Any = None) -> Any:
    """First non-null value."""
    value = _resolve(record, candidate_keys, lambda v: v is not None)
    return default if value is _MISSING else value


def resolve_number(record: Any, candidate_keys: Sequence[str]) -> Optional[Number]:
    """First present, non-empty-string value coerced to a finite number, else None."""
    value = _resolve(record, candidate_keys, lambda v: v != "")
    if value is _MISSING:
        return None
    return coerce_number(value)


def resolve_string(record: Any, candidate_keys: Sequence[str]) -> str:
    return to_safe_string(resolve_value(record, candidate_keys))


def resolve_optional_string(record: Any, candidate_keys: Sequence[str]) -> Optional[str]:
    """Trimmed string or None when blank/absent."""
    text = resolve_string(record, candidate_keys).strip()
    return text or None
