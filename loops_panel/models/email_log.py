from sqlalchemy import Column, String, DateTime, Text, JSON, ForeignKey
from datetime import datetime
from loops_panel.database import Base


class EmailLog(Base):
    __tablename__ = "email_logs"

    id = Column(String(36), primary_key=True, index=True)
    recipients = Column(JSON, nullable=False)
    subject = Column(String(500), nullable=False)
    html_content = Column(Text, nullable=False)
    from_name = Column(String(200))
    reply_to = Column(String(320))
    account_id = Column(String(64), ForeignKey("loops_accounts.id"), index=True)
    job_id = Column(String(36))
    status = Column(String(20), default="completed")  # completed, failed, failed_partial
    sent_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<EmailLog(id={self.id}, subject='{self.subject}', status='{self.status}')>"
