"""Corporate events router."""

import logging

from fastapi import APIRouter, Depends

from src.dashboard.client import XanoClient, XanoError
from src.dashboard.service import load_corporate_event
from src.web.dependencies import get_xano_client, upstream_http_error
from src.web.serializers import serialize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/corporate-events", tags=["Corporate Events"])


@router.get("/{event_id}", summary="Corporate Event Detail")
async def get_corporate_event(event_id: int, client: XanoClient = Depends(get_xano_client)):
    """Event summary, counterparties split into buy/sell side, advisors and insights."""
    try:
        detail = await load_corporate_event(client, event_id)
    except XanoError as e:
        raise upstream_http_error(e)
    return serialize(detail)
