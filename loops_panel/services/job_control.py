"""Pause / resume / stop for running import jobs"""
import logging
from dataclasses import dataclass

from loops_panel.exceptions import InvalidJobTransition, JobNotFound
from loops_panel.models import ImportJob, JobStatus
from loops_panel.services.job_runner import JobRunner
from loops_panel.services.job_store import JobStore

logger = logging.getLogger(__name__)


@dataclass
class ControlResult:
    status: str
    message: str


class JobControlGateway:
    """The only external writer of a job's desired running state.

    Requests that would not change anything (pausing a paused job, resuming
    a running one, stopping a finished one) report the current status and
    leave the job untouched.
    """

    ACTIONS = ("pause", "resume", "stop")

    def __init__(self, store: JobStore, runner: JobRunner):
        self.store = store
        self.runner = runner
        self.registry = runner.registry

    def control(self, job_id: str, action: str) -> ControlResult:
        if action not in self.ACTIONS:
            raise ValueError(f"Unknown job action: {action}")

        job = self.store.get(job_id)
        if job is None:
            raise JobNotFound(job_id)

        result = getattr(self, f"_{action}")(job)
        logger.info(f"Job {job_id}: {action} -> {result.status}")
        return result

    def _pause(self, job: ImportJob) -> ControlResult:
        if job.status == JobStatus.PAUSED:
            return ControlResult(job.status, "Job is already paused.")
        if job.status != JobStatus.RUNNING:
            return ControlResult(job.status, f"Job is {job.status} and cannot be paused.")

        context = self.registry.lookup(job.id)
        if context is not None:
            context.desired_status = JobStatus.PAUSED
        self.store.advance(job.id, JobStatus.PAUSED)
        return ControlResult(JobStatus.PAUSED, "Job paused successfully.")

    def _resume(self, job: ImportJob) -> ControlResult:
        if job.status in (JobStatus.RUNNING, JobStatus.PENDING):
            return ControlResult(job.status, f"Job is already {job.status}.")
        if job.status in JobStatus.TERMINAL:
            raise InvalidJobTransition(job.id, job.status, "resume")

        self.runner.resume(job.id)
        self.store.advance(job.id, JobStatus.RUNNING)
        return ControlResult(JobStatus.RUNNING, "Job resumed successfully.")

    def _stop(self, job: ImportJob) -> ControlResult:
        if job.status in JobStatus.TERMINAL:
            return ControlResult(job.status, f"Job is already {job.status}.")

        context = self.registry.lookup(job.id)
        if context is not None:
            context.desired_status = JobStatus.STOPPED
            self.registry.discard(job.id)
        self.store.advance(job.id, JobStatus.STOPPED)
        return ControlResult(JobStatus.STOPPED, "Job stopped successfully.")
