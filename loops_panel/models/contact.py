from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime
from loops_panel.database import Base


class Contact(Base):
    __tablename__ = "contacts"
    __table_args__ = (UniqueConstraint("email", "account_id", name="uq_contact_email_account"),)

    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(320), nullable=False, index=True)
    account_id = Column(String(64), ForeignKey("loops_accounts.id"), index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Contact(email='{self.email}', account_id={self.account_id})>"
