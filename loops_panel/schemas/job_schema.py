from pydantic import EmailStr, Field
from datetime import datetime
from typing import List, Literal, Optional
from loops_panel.schemas.base import CamelModel


class BulkImportRequest(CamelModel):
    emails: List[EmailStr]
    account_id: str = Field(min_length=1)
    delay: Optional[int] = Field(default=None, ge=0)  # ms between items


class BulkImportResponse(CamelModel):
    success: bool = True
    message: str
    job_id: str


class JobLogEntry(CamelModel):
    email: str
    status: Literal["success", "failed"]
    message: str
    timestamp: datetime


class ImportJobResponse(CamelModel):
    id: str
    account_id: str
    total_emails: int
    processed_emails: int
    status: str
    created_at: datetime
    completed_at: Optional[datetime] = None
    logs: List[JobLogEntry] = []


class JobControlRequest(CamelModel):
    job_id: str = Field(min_length=1)
    action: Literal["pause", "resume", "stop"]


class JobControlResponse(CamelModel):
    success: bool = True
    status: str
    message: str
