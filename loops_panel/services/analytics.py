"""Loop analytics aggregated from stored webhook events"""
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from loops_panel.models import AnalyticsEvent

SENT = "loop.email.sent"
OPENED = "email.opened"
CLICKED = "email.clicked"
UNSUBSCRIBED = "email.unsubscribed"


def record_event(
    db: Session,
    account_id: str,
    event_name: str,
    contact_email: str,
    source_type: Optional[str] = None,
    source_id: Optional[str] = None,
    event_time: Optional[datetime] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> AnalyticsEvent:
    event = AnalyticsEvent(
        id=str(uuid.uuid4()),
        account_id=account_id,
        event_name=event_name,
        source_type=source_type or "unknown",
        source_id=source_id,
        contact_email=contact_email,
        event_time=event_time or datetime.utcnow(),
        payload=payload or {},
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def event_time_from_epoch(seconds: float) -> datetime:
    """Naive UTC datetime, matching the other stored timestamps"""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)


def unique_loops(db: Session, account_id: Optional[str]) -> List[Dict[str, str]]:
    query = db.query(AnalyticsEvent.source_id).filter(
        AnalyticsEvent.source_type == "loop",
        AnalyticsEvent.source_id.isnot(None),
    )
    if account_id:
        query = query.filter(AnalyticsEvent.account_id == account_id)
    loop_ids = OrderedDict((row.source_id, None) for row in query.order_by(AnalyticsEvent.event_time))
    return [{"loop_id": loop_id} for loop_id in loop_ids]


def loop_analytics(db: Session, loop_id: str, account_id: Optional[str]) -> Dict[str, Any]:
    query = db.query(AnalyticsEvent).filter(AnalyticsEvent.source_id == loop_id)
    if account_id:
        query = query.filter(AnalyticsEvent.account_id == account_id)
    events = query.order_by(AnalyticsEvent.event_time).all()

    counts = {SENT: 0, OPENED: 0, CLICKED: 0, UNSUBSCRIBED: 0}
    per_day: Dict[str, Dict[str, Any]] = {}
    daily_keys = {SENT: "sends", OPENED: "opens", CLICKED: "clicks"}

    for event in events:
        if event.event_name in counts:
            counts[event.event_name] += 1

        day = event.event_time.date().isoformat()
        bucket = per_day.setdefault(day, {"date": day, "sends": 0, "opens": 0, "clicks": 0})
        if event.event_name in daily_keys:
            bucket[daily_keys[event.event_name]] += 1

    return {
        "sends": counts[SENT],
        "opens": counts[OPENED],
        "clicks": counts[CLICKED],
        "unsubscribes": counts[UNSUBSCRIBED],
        "events": events,
        "events_over_time": [per_day[day] for day in sorted(per_day)],
    }
