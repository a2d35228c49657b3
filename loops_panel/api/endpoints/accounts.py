"""Loops.so account management"""
import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from loops_panel.api.deps import get_loops_client
from loops_panel.database import get_db
from loops_panel.models import LoopsAccount, Webhook
from loops_panel.schemas import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    ConnectionTestResponse,
    WebhookSecretRequest,
)
from loops_panel.services.accounts import account_id_for, get_account, mask_api_key
from loops_panel.services.loops_client import LoopsClient

router = APIRouter()


def _to_response(account: LoopsAccount) -> AccountResponse:
    return AccountResponse(
        id=account.id,
        name=account.name,
        api_key_hint=mask_api_key(account.api_key),
        organization_id=account.organization_id,
        is_active=account.is_active,
        created_at=account.created_at,
    )


@router.get("/accounts", response_model=List[AccountResponse])
async def list_accounts(db: Session = Depends(get_db)):
    accounts = db.query(LoopsAccount).order_by(LoopsAccount.created_at).all()
    return [_to_response(account) for account in accounts]


@router.post("/accounts", response_model=AccountResponse)
async def create_account(request: AccountCreate, db: Session = Depends(get_db)):
    """Register an API key; the same name and key always map to the same account"""
    account_id = account_id_for(request.name, request.api_key)
    account = db.get(LoopsAccount, account_id)

    if account is None:
        account = LoopsAccount(id=account_id, name=request.name, api_key=request.api_key)
        db.add(account)
    account.organization_id = request.organization_id
    account.is_active = True

    db.commit()
    db.refresh(account)
    return _to_response(account)


@router.patch("/accounts/{account_id}", response_model=AccountResponse)
async def update_account(account_id: str, request: AccountUpdate, db: Session = Depends(get_db)):
    account = get_account(db, account_id)
    account.is_active = request.is_active
    db.commit()
    db.refresh(account)
    return _to_response(account)


@router.get("/accounts/{account_id}/test-connection", response_model=ConnectionTestResponse)
async def test_connection(
    account_id: str,
    db: Session = Depends(get_db),
    client: LoopsClient = Depends(get_loops_client),
):
    """Validate the stored API key against Loops.so"""
    account = get_account(db, account_id)
    loops_response = await client.test_api_key(account.api_key)

    if isinstance(loops_response, dict) and loops_response.get("success"):
        return ConnectionTestResponse(success=True, message="Connection successful!", data=loops_response)
    return ConnectionTestResponse(
        success=False,
        message="Loops.so API key validation failed with an unexpected response.",
        data=loops_response if isinstance(loops_response, dict) else None,
    )


@router.put("/accounts/{account_id}/webhook")
async def set_webhook_secret(account_id: str, request: WebhookSecretRequest, db: Session = Depends(get_db)):
    """Store the signing secret used to verify this account's webhooks"""
    get_account(db, account_id)

    webhook = db.query(Webhook).filter(Webhook.account_id == account_id).first()
    if webhook is None:
        webhook = Webhook(id=str(uuid.uuid4()), account_id=account_id, signing_secret=request.signing_secret)
        db.add(webhook)
    else:
        webhook.signing_secret = request.signing_secret
    db.commit()

    return {"success": True, "message": "Webhook signing secret saved."}
