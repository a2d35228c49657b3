from loops_panel.models.account import LoopsAccount
from loops_panel.models.contact import Contact
from loops_panel.models.email_log import EmailLog
from loops_panel.models.import_job import ImportJob, JobStatus
from loops_panel.models.analytics_event import AnalyticsEvent, Webhook

__all__ = [
    "LoopsAccount",
    "Contact",
    "EmailLog",
    "ImportJob",
    "JobStatus",
    "AnalyticsEvent",
    "Webhook",
]
