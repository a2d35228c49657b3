"""Transactional email sending and the email log"""
import logging
import uuid
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from loops_panel.api.deps import get_loops_client
from loops_panel.database import get_db
from loops_panel.exceptions import ExternalApiError
from loops_panel.models import EmailLog
from loops_panel.schemas import EmailLogResponse, SendEmailRequest, SendEmailResponse
from loops_panel.services.accounts import get_active_account
from loops_panel.services.analytics import record_event
from loops_panel.services.loops_client import LoopsClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/loops/send-email", response_model=SendEmailResponse)
async def send_email(
    request: SendEmailRequest,
    db: Session = Depends(get_db),
    client: LoopsClient = Depends(get_loops_client),
):
    """
    Send one transactional email per recipient
    Partial failures are reported per recipient; the call only fails when nobody got the email
    """
    account = get_active_account(db, request.account_id)
    recipients = [str(r) for r in request.recipients]
    reply_to = str(request.reply_to) if request.reply_to else None

    sent_count = 0
    errors = []

    for recipient in recipients:
        try:
            await client.send_transactional(account.api_key, {
                "to": recipient,
                "subject": request.subject,
                "body": request.html_content,
                "from": request.from_name,
                "replyTo": reply_to,
            })
        except ExternalApiError as e:
            logger.warning(f"Failed to send email to {recipient} via Loops.so: {e.message}")
            errors.append({"recipient": recipient, "error": e.message})
            continue

        sent_count += 1
        record_event(
            db,
            account_id=account.id,
            event_name="transactional.email.sent",
            source_type="transactional",
            contact_email=recipient,
            payload={"subject": request.subject, "htmlContent": request.html_content},
        )

    failed_count = len(errors)
    if failed_count == 0:
        status = "completed"
    elif sent_count == 0:
        status = "failed"
    else:
        status = "failed_partial"

    db.add(EmailLog(
        id=str(uuid.uuid4()),
        recipients=recipients,
        subject=request.subject,
        html_content=request.html_content,
        from_name=request.from_name,
        reply_to=reply_to,
        account_id=account.id,
        status=status,
    ))
    db.commit()

    if failed_count == 0:
        plural = "s" if sent_count != 1 else ""
        return SendEmailResponse(
            success=True,
            message=f"Email sent successfully to {sent_count} recipient{plural}.",
            recipients=sent_count,
        )
    if sent_count > 0:
        return SendEmailResponse(
            success=True,
            message=f"Email sent to {sent_count} recipients, but {failed_count} failed.",
            recipients=sent_count,
            failed=failed_count,
            errors=errors,
        )

    body = SendEmailResponse(
        success=False,
        message="Failed to send email to any recipients.",
        failed=failed_count,
        errors=errors,
    )
    return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))


@router.get("/email-logs", response_model=List[EmailLogResponse])
async def list_email_logs(
    account_id: Optional[str] = Query(default=None, alias="accountId"),
    db: Session = Depends(get_db),
):
    query = db.query(EmailLog)
    if account_id:
        query = query.filter(EmailLog.account_id == account_id)
    return query.order_by(EmailLog.sent_at).all()
