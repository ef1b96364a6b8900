"""Cross-source de-duplication of normalized records."""
from typing import Any, Callable, Hashable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def dedupe(
    primary: Sequence[Any],
    secondary: Sequence[T],
    identity_of: Callable[[Any], Optional[Hashable]],
) -> List[T]:
    """
    Return ``secondary`` without the records whose identity already appears in ``primary``.

    Order within ``secondary`` is kept and ``primary`` is not touched. Records
    whose identity is None cannot be matched and are kept.
    """
    seen = {identity_of(record) for record in primary}
    seen.discard(None)
    kept = []
    for record in secondary:
        key = identity_of(record)
        if key is None or key not in seen:
            kept.append(record)
    return kept
