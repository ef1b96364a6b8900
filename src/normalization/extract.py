"""Collection shape detection for Xano list responses."""
import logging
from typing import Any, Iterator, List, Mapping, Optional

logger = logging.getLogger(__name__)

# Probed in priority order
ARRAY_WRAPPER_KEYS = ("items", "data", "results", "list")


def extract_array(raw: Any) -> List[Any]:
    """
    Return the collection held by ``raw``.

    A list comes back unchanged (non-record elements included). A mapping is
    probed for the wrapper keys and the first list-valued one wins. Anything
    else yields an empty list.
    """
    if isinstance(raw, list):
        return raw
    if isinstance(raw, Mapping):
        for key in ARRAY_WRAPPER_KEYS:
            value = raw.get(key)
            if isinstance(value, list):
                return value
    return []


def as_record(value: Any) -> Optional[Mapping[str, Any]]:
    """Shape guard: the value if it is a JSON object, else None."""
    return value if isinstance(value, Mapping) else None


def iter_records(raw: Any) -> Iterator[Mapping[str, Any]]:
    """Yield only the object elements of ``extract_array(raw)``."""
    for element in extract_array(raw):
        if isinstance(element, Mapping):
            yield element
        else:
            logger.debug(f"Skipping non-record element of type {type(element).__name__}")


def nested(record: Any, *path: str) -> Any:
    """Walk a chain of object keys, None as soon as a hop is missing."""
    current = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current
