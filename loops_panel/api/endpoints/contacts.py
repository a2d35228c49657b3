"""Contact lookup and removal"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, List, Optional
from loops_panel.api.deps import get_loops_client
from loops_panel.database import get_db
from loops_panel.models import Contact
from loops_panel.schemas import ContactResponse, DeleteContactRequest
from loops_panel.services import contacts
from loops_panel.services.accounts import get_account
from loops_panel.services.loops_client import LoopsClient

router = APIRouter()


@router.get("/contacts", response_model=List[ContactResponse])
async def list_contacts(
    account_id: Optional[str] = Query(default=None, alias="accountId"),
    db: Session = Depends(get_db),
):
    query = db.query(Contact)
    if account_id:
        query = query.filter(Contact.account_id == account_id)
    return query.order_by(Contact.created_at).all()


@router.get("/loops/contacts/find")
async def find_contact(
    account_id: str = Query(alias="accountId", min_length=1),
    email: str = Query(min_length=1),
    db: Session = Depends(get_db),
    client: LoopsClient = Depends(get_loops_client),
) -> Any:
    """Look a contact up on Loops.so (not in the local table)"""
    account = get_account(db, account_id)
    return await client.find_contact(account.api_key, email)


@router.post("/loops/contacts/delete")
async def delete_contact(
    request: DeleteContactRequest,
    db: Session = Depends(get_db),
    client: LoopsClient = Depends(get_loops_client),
) -> Any:
    """Delete a contact on Loops.so, then drop the local record"""
    account = get_account(db, request.account_id)
    email = str(request.email)

    loops_response = await client.delete_contact(account.api_key, email)
    contacts.delete_contact(db, email, account.id)
    return loops_response
