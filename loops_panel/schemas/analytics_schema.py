from pydantic import EmailStr
from datetime import datetime
from typing import Any, Dict, List, Optional
from loops_panel.schemas.base import CamelModel


class ContactIdentity(CamelModel):
    id: str
    email: EmailStr


class EmailRef(CamelModel):
    id: str


class LoopsEvent(CamelModel):
    """Webhook body sent by Loops.so"""
    event_name: str
    event_time: float  # unix seconds
    source_type: Optional[str] = None
    campaign_id: Optional[str] = None
    loop_id: Optional[str] = None
    transactional_id: Optional[str] = None
    contact_identity: ContactIdentity
    email: Optional[EmailRef] = None


class AnalyticsEventResponse(CamelModel):
    id: str
    account_id: str
    event_name: str
    source_type: str
    source_id: Optional[str]
    contact_email: str
    event_time: datetime
    payload: Optional[Dict[str, Any]]


class LoopSummary(CamelModel):
    loop_id: str


class DailyCounts(CamelModel):
    date: str
    sends: int = 0
    opens: int = 0
    clicks: int = 0


class LoopAnalyticsResponse(CamelModel):
    sends: int
    opens: int
    clicks: int
    unsubscribes: int
    events: List[AnalyticsEventResponse]
    events_over_time: List[DailyCounts]
