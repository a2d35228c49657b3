"""Service wiring shared by the routers"""
from typing import Optional
from fastapi import FastAPI, Request
from loops_panel.config import get_settings
from loops_panel.database import SessionLocal
from loops_panel.services.job_control import JobControlGateway
from loops_panel.services.job_runner import JobContextRegistry, JobRunner
from loops_panel.services.job_store import JobStore
from loops_panel.services.loops_client import LoopsClient


def install_services(app: FastAPI, client: Optional[LoopsClient] = None) -> None:
    """Build the Loops client, job store, runner and control gateway onto app.state"""
    settings = get_settings()
    client = client or LoopsClient(
        base_url=settings.loops_api_base_url,
        timeout=settings.loops_api_timeout,
    )
    store = JobStore(SessionLocal)
    runner = JobRunner(store, client, JobContextRegistry(), SessionLocal)

    app.state.loops_client = client
    app.state.job_store = store
    app.state.job_runner = runner
    app.state.job_control = JobControlGateway(store, runner)


def get_loops_client(request: Request) -> LoopsClient:
    return request.app.state.loops_client


def get_job_store(request: Request) -> JobStore:
    return request.app.state.job_store


def get_job_runner(request: Request) -> JobRunner:
    return request.app.state.job_runner


def get_job_control(request: Request) -> JobControlGateway:
    return request.app.state.job_control
