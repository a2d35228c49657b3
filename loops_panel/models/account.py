from sqlalchemy import Column, String, DateTime, Boolean
from datetime import datetime
from loops_panel.database import Base


class LoopsAccount(Base):
    __tablename__ = "loops_accounts"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    api_key = Column(String(200), nullable=False)
    organization_id = Column(String(200))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<LoopsAccount(id={self.id}, name='{self.name}')>"
