from pydantic import Field
from datetime import datetime
from typing import Optional
from loops_panel.schemas.base import CamelModel


class AccountCreate(CamelModel):
    name: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    organization_id: Optional[str] = None


class AccountUpdate(CamelModel):
    is_active: bool


class AccountResponse(CamelModel):
    id: str
    name: str
    api_key_hint: str  # last four characters only
    organization_id: Optional[str]
    is_active: bool
    created_at: Optional[datetime]


class WebhookSecretRequest(CamelModel):
    signing_secret: str = Field(min_length=1)


class ConnectionTestResponse(CamelModel):
    success: bool
    message: str
    data: Optional[dict] = None
