"""Background runner for bulk contact imports.

One asyncio task processes one job, strictly in input order. Between items
the task re-reads its JobContext, which is where pause/stop requests from
the control gateway land. Job state itself lives in the JobStore; the
context only exists while the job is alive in this process.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from sqlalchemy.orm import Session

from loops_panel.exceptions import ExternalApiError, JobContextLost
from loops_panel.models import ImportJob, JobStatus, LoopsAccount
from loops_panel.services.contacts import save_contact
from loops_panel.services.job_store import JobStore, make_log_entry
from loops_panel.services.loops_client import LoopsClient

logger = logging.getLogger(__name__)


@dataclass
class JobContext:
    """Live control state for one job: its inputs plus the desired status."""
    job_id: str
    account_id: str
    emails: List[str]
    api_key: str
    delay: float  # seconds
    desired_status: str = JobStatus.RUNNING
    task: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def runner_alive(self) -> bool:
        return self.task is not None and not self.task.done()


class JobContextRegistry:
    """At most one JobContext per job id"""

    def __init__(self):
        self._contexts: Dict[str, JobContext] = {}

    def register(self, context: JobContext) -> None:
        if context.job_id in self._contexts:
            raise ValueError(f"Job {context.job_id} already has a live context")
        self._contexts[context.job_id] = context

    def lookup(self, job_id: str) -> Optional[JobContext]:
        return self._contexts.get(job_id)

    def discard(self, job_id: str) -> None:
        self._contexts.pop(job_id, None)

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)


class JobRunner:
    def __init__(
        self,
        store: JobStore,
        client: LoopsClient,
        registry: JobContextRegistry,
        session_factory: Callable[[], Session],
    ):
        self.store = store
        self.client = client
        self.registry = registry
        self.session_factory = session_factory
        self._tasks: Set[asyncio.Task] = set()

    def start(self, account: LoopsAccount, emails: List[str], delay_ms: int) -> ImportJob:
        """Create a pending job and schedule its processing.

        Returns as soon as the job exists; no item has been processed yet.
        Must be called from inside the running event loop.
        """
        job = self.store.create(account.id, len(emails))
        context = JobContext(
            job_id=job.id,
            account_id=account.id,
            emails=list(emails),
            api_key=account.api_key,
            delay=delay_ms / 1000.0,
        )
        self.registry.register(context)
        self._launch(context, offset=0)
        logger.info(f"Import job {job.id} created for account {account.id} with {len(emails)} emails")
        return job

    def resume(self, job_id: str) -> JobContext:
        """Flip the context back to running and re-enter the loop at the stored offset.

        If the previous task has not reached its checkpoint yet it simply
        keeps going, so a job never has two runners.
        """
        context = self.registry.lookup(job_id)
        if context is None:
            raise JobContextLost(job_id)

        context.desired_status = JobStatus.RUNNING
        if not context.runner_alive:
            job = self.store.get(job_id)
            self._launch(context, offset=job.processed_emails)
        return context

    def _launch(self, context: JobContext, offset: int) -> None:
        task = asyncio.create_task(self.run(context.job_id, offset), name=f"import-job-{context.job_id}")
        context.task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def run(self, job_id: str, offset: int) -> None:
        """Process items ``offset..total-1`` of a job, entering the running state"""
        context = self.registry.lookup(job_id)
        if context is None:
            logger.warning(f"Import job {job_id} has no live context; not running")
            return

        try:
            await self._run_loop(context, offset)
        except Exception:
            # Only store failures end up here; item failures never leave _process_item
            logger.exception(f"Import job {job_id} crashed at item {offset}; marking it stopped")
            self.registry.discard(job_id)
            self.store.advance(job_id, JobStatus.STOPPED)

    async def _run_loop(self, context: JobContext, offset: int) -> None:
        job_id = context.job_id
        total = len(context.emails)

        if context.desired_status == JobStatus.RUNNING:
            self.store.advance(job_id, JobStatus.RUNNING)
            logger.info(f"Import job {job_id} running from item {offset} of {total}")

        for index in range(offset, total):
            if not self._checkpoint(context, index):
                return

            entry = await self._process_item(context, index)
            self.store.advance(job_id, self._status_after_item(context), index + 1, entry)

            if context.desired_status == JobStatus.RUNNING and index + 1 < total:
                await asyncio.sleep(context.delay)

        final_status = JobStatus.STOPPED if context.desired_status == JobStatus.STOPPED else JobStatus.COMPLETED
        self.store.advance(job_id, final_status, total)
        self.registry.discard(job_id)
        logger.info(f"Import job {job_id} {final_status} after {total} emails")

    def _checkpoint(self, context: JobContext, index: int) -> bool:
        """Re-read the desired status before item ``index``.

        On pause or stop the current offset is persisted and False is
        returned; the task then ends and the state stays as checkpointed.
        """
        desired = context.desired_status
        if desired == JobStatus.RUNNING:
            return True

        self.store.advance(context.job_id, desired, index)
        if desired == JobStatus.STOPPED:
            self.registry.discard(context.job_id)
        logger.info(f"Import job {context.job_id} {desired} at item {index} of {len(context.emails)}")
        return False

    @staticmethod
    def _status_after_item(context: JobContext) -> str:
        # A pause or stop that arrived during the API call was already
        # persisted by the gateway; don't overwrite it with running
        if context.desired_status in (JobStatus.PAUSED, JobStatus.STOPPED):
            return context.desired_status
        return JobStatus.RUNNING

    async def _process_item(self, context: JobContext, index: int) -> Dict[str, str]:
        """Import one email. Failures become a failed log entry, never an exception."""
        email = context.emails[index]
        try:
            await self.client.create_contact(context.api_key, email)
            with self.session_factory() as db:
                save_contact(db, email, context.account_id)
        except ExternalApiError as e:
            logger.warning(f"Failed to import contact {email} for job {context.job_id}: {e.message}")
            return make_log_entry(email, "failed", e.message)
        except Exception as e:
            logger.exception(f"Unexpected error importing contact {email} for job {context.job_id}")
            return make_log_entry(email, "failed", str(e) or type(e).__name__)

        return make_log_entry(email, "success", f"{email} added successfully")

    async def shutdown(self) -> None:
        """Cancel every running job task; their contexts are lost with the process"""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Cancelled {len(tasks)} running import jobs")
