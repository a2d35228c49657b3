from pydantic import EmailStr, Field
from datetime import datetime
from typing import List, Optional
from loops_panel.schemas.base import CamelModel


class SendEmailRequest(CamelModel):
    recipients: List[EmailStr] = Field(min_length=1)
    subject: str = Field(min_length=1)
    html_content: str = Field(min_length=1)
    from_name: Optional[str] = None
    reply_to: Optional[EmailStr] = None
    account_id: str = Field(min_length=1)


class RecipientError(CamelModel):
    recipient: str
    error: str


class SendEmailResponse(CamelModel):
    success: bool
    message: str
    recipients: int = 0
    failed: int = 0
    errors: List[RecipientError] = []


class EmailLogResponse(CamelModel):
    id: str
    recipients: List[str]
    subject: str
    html_content: str
    from_name: Optional[str]
    reply_to: Optional[str]
    account_id: Optional[str]
    job_id: Optional[str]
    status: str
    sent_at: Optional[datetime]
