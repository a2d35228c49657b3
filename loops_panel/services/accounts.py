"""Account lookup shared by the endpoints and the import runner"""
import hashlib

from sqlalchemy.orm import Session

from loops_panel.exceptions import AccountNotFound, InvalidAccount
from loops_panel.models import LoopsAccount


def account_id_for(name: str, api_key: str) -> str:
    """Stable id, so registering the same credentials twice updates one account"""
    return hashlib.sha256(f"{name}\x00{api_key}".encode("utf-8")).hexdigest()[:32]


def get_account(db: Session, account_id: str) -> LoopsAccount:
    account = db.get(LoopsAccount, account_id)
    if account is None:
        raise AccountNotFound(account_id)
    return account


def get_active_account(db: Session, account_id: str) -> LoopsAccount:
    account = get_account(db, account_id)
    if not account.is_active:
        raise InvalidAccount(account_id)
    return account


def mask_api_key(api_key: str) -> str:
    return f"...{api_key[-4:]}" if len(api_key) > 4 else "..."
