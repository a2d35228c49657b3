from pydantic import EmailStr, Field
from datetime import datetime
from typing import Any, Dict, Optional
from loops_panel.schemas.base import CamelModel


class SingleContactRequest(CamelModel):
    email: EmailStr
    account_id: str = Field(min_length=1)


class DeleteContactRequest(CamelModel):
    email: EmailStr
    account_id: str = Field(min_length=1)


class ContactResponse(CamelModel):
    id: str
    email: str
    account_id: Optional[str]
    created_at: Optional[datetime]


class SingleContactResponse(CamelModel):
    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None
