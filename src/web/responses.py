"""Response conventions for the sector intelligence API.

CONVENTIONS
-----------

1. GET single resource:
   Return the serialized record directly.
   Example: {"id": 42, "description": "Acme acquires Widgets", "buyers": [...]}

2. GET collection (paged upstream):
   Return: {"status": "success", "data": [...], "total": int, "page": int,
            "per_page": int, "page_total": int, "next_page": int|null, "prev_page": int|null}

3. GET collection (unpaged):
   Return: {"status": "success", "data": [...], "total": int}

4. Background task trigger (StandardResponse):
   Return: {"status": "accepted", "message": "..."}

5. Composite page (sector overview):
   Return the serialized page object with a "widgets" list; each widget
   carries ok/status_code/error/ms so clients can show per-widget errors.

ERRORS
------
All errors use standard FastAPI HTTPException, which returns:
   {"detail": "Human-readable error message"}

STATUS CODES
------------
- 200: Success
- 401: Missing token, or upstream rejected it
- 404: Upstream resource not found
- 502: Upstream failure
"""

from typing import Any, Dict, List, Optional


def paged(
    data: List[Dict],
    total: int,
    page: int,
    per_page: int,
    page_total: int,
    next_page: Optional[int] = None,
    prev_page: Optional[int] = None,
) -> Dict[str, Any]:
    """Wrap a page of results in the standard envelope."""
    return {
        "status": "success",
        "data": data,
        "total": total,
        "page": page,
        "per_page": per_page,
        "page_total": page_total,
        "next_page": next_page,
        "prev_page": prev_page,
    }


def collection(data: List[Dict]) -> Dict[str, Any]:
    """Wrap an unpaginated list result."""
    return {
        "status": "success",
        "data": data,
        "total": len(data),
    }
