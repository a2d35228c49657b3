"""Webhook receiver and loop analytics"""
import json
import logging
from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import List, Optional
from loops_panel.database import get_db
from loops_panel.models import Webhook
from loops_panel.schemas import LoopAnalyticsResponse, LoopsEvent, LoopSummary
from loops_panel.services import analytics
from loops_panel.services.webhook_signature import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhooks/loops")
async def receive_loops_webhook(
    request: Request,
    webhook_id: Optional[str] = Header(default=None, alias="webhook-id"),
    webhook_timestamp: Optional[str] = Header(default=None, alias="webhook-timestamp"),
    webhook_signature: Optional[str] = Header(default=None, alias="webhook-signature"),
    account_id: Optional[str] = Header(default=None, alias="loops-account-id"),
    db: Session = Depends(get_db),
):
    """
    Record a Loops.so event
    The signature is checked against the raw body before the payload is parsed
    """
    if not account_id:
        return _bad_request("Missing Loops account ID.")

    webhook = db.query(Webhook).filter(Webhook.account_id == account_id).first()
    raw_body = await request.body()
    verify_signature(
        webhook.signing_secret if webhook else None,
        webhook_id,
        webhook_timestamp,
        webhook_signature,
        raw_body,
    )

    try:
        payload = json.loads(raw_body)
    except ValueError:
        return _bad_request("Invalid event data.")
    try:
        event = LoopsEvent.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e

    analytics.record_event(
        db,
        account_id=account_id,
        event_name=event.event_name,
        source_type=event.source_type,
        source_id=event.campaign_id or event.loop_id or event.transactional_id,
        contact_email=str(event.contact_identity.email),
        event_time=analytics.event_time_from_epoch(event.event_time),
        payload=payload,
    )
    logger.info(f"Recorded {event.event_name} event for account {account_id}")
    return {"success": True, "received": True}


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": message})


@router.get("/loops/analytics/loops", response_model=List[LoopSummary])
async def list_loops(
    account_id: Optional[str] = Query(default=None, alias="accountId"),
    db: Session = Depends(get_db),
):
    return analytics.unique_loops(db, account_id)


@router.get("/loops/analytics/loops/{loop_id}", response_model=LoopAnalyticsResponse)
async def get_loop_analytics(
    loop_id: str,
    account_id: Optional[str] = Query(default=None, alias="accountId"),
    db: Session = Depends(get_db),
):
    """Send/open/click/unsubscribe counts for one loop, plus a per-day series"""
    return analytics.loop_analytics(db, loop_id, account_id)
