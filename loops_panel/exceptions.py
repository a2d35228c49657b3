"""Error taxonomy for the panel.

Every error carries the HTTP status it is reported with; the handler in
``loops_panel.main`` renders them as ``{"success": false, "message": ...}``.
Request validation errors come from pydantic and are rendered separately.
"""
from typing import Optional


class PanelError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountNotFound(PanelError):
    status_code = 404

    def __init__(self, account_id: str):
        super().__init__(f"Account {account_id} not found.")
        self.account_id = account_id


class InvalidAccount(PanelError):
    status_code = 400

    def __init__(self, account_id: str):
        super().__init__("Invalid or inactive Loops.so account selected.")
        self.account_id = account_id


class ExternalApiError(PanelError):
    """A call to the Loops.so API failed.

    ``status`` is the upstream HTTP status, or None when the request never
    got a response (DNS failure, timeout, connection reset).
    """

    status_code = 502

    def __init__(self, status: Optional[int], endpoint: str, message: str):
        super().__init__(message)
        self.status = status
        self.endpoint = endpoint


class JobNotFound(PanelError):
    status_code = 404

    def __init__(self, job_id: str):
        super().__init__("Job not found.")
        self.job_id = job_id


class JobContextLost(PanelError):
    status_code = 409

    def __init__(self, job_id: str):
        super().__init__("Job cannot be resumed in this process. Start a new import job instead.")
        self.job_id = job_id


class InvalidJobTransition(PanelError):
    status_code = 409

    def __init__(self, job_id: str, status: str, action: str):
        super().__init__(f"Cannot {action} a job that is {status}.")
        self.job_id = job_id
        self.status = status
        self.action = action


class WebhookVerificationError(PanelError):
    status_code = 401

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code
