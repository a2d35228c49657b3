"""Local record of contacts accepted by Loops.so"""
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from loops_panel.models import Contact


def find_contact(db: Session, email: str, account_id: Optional[str] = None) -> Optional[Contact]:
    query = db.query(Contact).filter(Contact.email == email)
    if account_id:
        query = query.filter(Contact.account_id == account_id)
    return query.first()


def save_contact(db: Session, email: str, account_id: str) -> Contact:
    """Record a contact once per account; an existing row is returned as is"""
    existing = find_contact(db, email, account_id)
    if existing:
        return existing

    contact = Contact(id=str(uuid.uuid4()), email=email, account_id=account_id)
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def delete_contact(db: Session, email: str, account_id: str) -> bool:
    contact = find_contact(db, email, account_id)
    if not contact:
        return False
    db.delete(contact)
    db.commit()
    return True
