from sqlalchemy import Column, String, DateTime, JSON, ForeignKey
from datetime import datetime
from loops_panel.database import Base


class AnalyticsEvent(Base):
    __tablename__ = "analytics_events"

    id = Column(String(36), primary_key=True, index=True)
    account_id = Column(String(64), ForeignKey("loops_accounts.id"), nullable=False, index=True)
    event_name = Column(String(100), nullable=False, index=True)
    source_type = Column(String(20), nullable=False)  # campaign, loop, transactional, unknown
    source_id = Column(String(100), index=True)
    contact_email = Column(String(320), nullable=False)
    event_time = Column(DateTime, default=datetime.utcnow)
    payload = Column(JSON)  # raw webhook body

    def __repr__(self):
        return f"<AnalyticsEvent(event='{self.event_name}', source={self.source_type}:{self.source_id})>"


class Webhook(Base):
    __tablename__ = "webhooks"

    id = Column(String(36), primary_key=True, index=True)
    account_id = Column(String(64), ForeignKey("loops_accounts.id"), unique=True, nullable=False)
    signing_secret = Column(String(200), nullable=False)
