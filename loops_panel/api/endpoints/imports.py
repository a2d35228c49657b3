"""Contact import endpoints: bulk jobs and single contacts"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from loops_panel.api.deps import get_job_runner, get_loops_client
from loops_panel.config import get_settings
from loops_panel.database import get_db
from loops_panel.schemas import (
    BulkImportRequest,
    BulkImportResponse,
    SingleContactRequest,
    SingleContactResponse,
)
from loops_panel.services.accounts import get_active_account
from loops_panel.services.contacts import save_contact
from loops_panel.services.job_runner import JobRunner
from loops_panel.services.loops_client import LoopsClient

router = APIRouter()


@router.post("/loops/import-contacts", response_model=BulkImportResponse, status_code=202)
async def import_contacts(
    request: BulkImportRequest,
    db: Session = Depends(get_db),
    runner: JobRunner = Depends(get_job_runner),
):
    """
    Start a bulk import job
    Returns the job id immediately; progress is read from /import-jobs/{job_id}
    """
    account = get_active_account(db, request.account_id)
    delay_ms = request.delay if request.delay is not None else get_settings().default_import_delay_ms
    job = runner.start(account, [str(email) for email in request.emails], delay_ms)

    return BulkImportResponse(
        message="Import job started successfully.",
        job_id=job.id,
    )


@router.post("/loops/import-contact", response_model=SingleContactResponse)
async def import_contact(
    request: SingleContactRequest,
    db: Session = Depends(get_db),
    client: LoopsClient = Depends(get_loops_client),
):
    """Add one contact to Loops.so and record it locally"""
    account = get_active_account(db, request.account_id)
    email = str(request.email)

    loops_response = await client.create_contact(account.api_key, email)
    save_contact(db, email, account.id)

    return SingleContactResponse(
        message=f"Contact {email} successfully added.",
        data=loops_response if isinstance(loops_response, dict) else None,
    )
