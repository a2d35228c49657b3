from sqlalchemy import Column, Integer, String, DateTime, JSON
from datetime import datetime
from loops_panel.database import Base


class JobStatus:
    PENDING = "pending"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    COMPLETED = "completed"

    TERMINAL = (STOPPED, COMPLETED)
    ACTIVE = (PENDING, RUNNING, PAUSED)


class ImportJob(Base):
    __tablename__ = "import_jobs"

    id = Column(String(36), primary_key=True, index=True)
    account_id = Column(String(64), nullable=False, index=True)
    total_emails = Column(Integer, nullable=False)
    processed_emails = Column(Integer, default=0, nullable=False)
    status = Column(String(20), default=JobStatus.PENDING, index=True)  # pending, running, paused, stopped, completed
    # Append-only [{email, status, message, timestamp}], reassigned (never mutated in place)
    logs = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime)

    def __repr__(self):
        return f"<ImportJob(id={self.id}, status='{self.status}', {self.processed_emails}/{self.total_emails})>"
