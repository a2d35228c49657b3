"""Jobs endpoints for polling and controlling import jobs"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from loops_panel.api.deps import get_job_control, get_job_store
from loops_panel.exceptions import JobNotFound
from loops_panel.schemas import ImportJobResponse, JobControlRequest, JobControlResponse
from loops_panel.services.job_control import JobControlGateway
from loops_panel.services.job_store import JobStore

router = APIRouter()


@router.get("/import-jobs/{job_id}", response_model=ImportJobResponse)
async def get_job_status(job_id: str, store: JobStore = Depends(get_job_store)):
    """Get the status of an import job, including its per-email log"""
    job = store.get(job_id)
    if not job:
        raise JobNotFound(job_id)
    return job


@router.get("/import-jobs", response_model=List[ImportJobResponse])
async def list_jobs(
    account_id: Optional[str] = Query(default=None, alias="accountId"),
    store: JobStore = Depends(get_job_store),
):
    return store.list(account_id)


@router.post("/jobs/control", response_model=JobControlResponse)
async def control_job(request: JobControlRequest, gateway: JobControlGateway = Depends(get_job_control)):
    """Pause, resume or stop an import job"""
    result = gateway.control(request.job_id, request.action)
    return JobControlResponse(status=result.status, message=result.message)
