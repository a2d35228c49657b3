from loops_panel.schemas.job_schema import (
    BulkImportRequest,
    BulkImportResponse,
    ImportJobResponse,
    JobControlRequest,
    JobControlResponse,
    JobLogEntry,
)
from loops_panel.schemas.account_schema import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    ConnectionTestResponse,
    WebhookSecretRequest,
)
from loops_panel.schemas.contact_schema import (
    ContactResponse,
    DeleteContactRequest,
    SingleContactRequest,
    SingleContactResponse,
)
from loops_panel.schemas.email_schema import EmailLogResponse, SendEmailRequest, SendEmailResponse
from loops_panel.schemas.analytics_schema import (
    AnalyticsEventResponse,
    LoopAnalyticsResponse,
    LoopsEvent,
    LoopSummary,
)

__all__ = [
    "BulkImportRequest",
    "BulkImportResponse",
    "ImportJobResponse",
    "JobControlRequest",
    "JobControlResponse",
    "JobLogEntry",
    "AccountCreate",
    "AccountResponse",
    "AccountUpdate",
    "ConnectionTestResponse",
    "WebhookSecretRequest",
    "ContactResponse",
    "DeleteContactRequest",
    "SingleContactRequest",
    "SingleContactResponse",
    "EmailLogResponse",
    "SendEmailRequest",
    "SendEmailResponse",
    "AnalyticsEventResponse",
    "LoopAnalyticsResponse",
    "LoopsEvent",
    "LoopSummary",
]
