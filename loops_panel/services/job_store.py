"""Import job records and their per-item logs"""
import logging
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from loops_panel.exceptions import JobNotFound
from loops_panel.models import ImportJob, JobStatus

logger = logging.getLogger(__name__)


def make_log_entry(email: str, status: str, message: str) -> Dict[str, str]:
    return {
        "email": email,
        "status": status,
        "message": message,
        "timestamp": datetime.utcnow().isoformat(),
    }


class JobStore:
    """Single source of truth for job state.

    Read by the status endpoints and written by the runner and the control
    gateway. Every method opens and commits its own session, so a reader
    only ever sees what a completed ``advance`` left behind.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def create(self, account_id: str, total_emails: int) -> ImportJob:
        with self.session_factory() as db:
            job = ImportJob(
                id=str(uuid.uuid4()),
                account_id=account_id,
                total_emails=total_emails,
                processed_emails=0,
                status=JobStatus.PENDING,
                logs=[],
                created_at=datetime.utcnow(),
            )
            db.add(job)
            db.commit()
            db.refresh(job)
            return job

    def get(self, job_id: str) -> Optional[ImportJob]:
        with self.session_factory() as db:
            return db.get(ImportJob, job_id)

    def list(self, account_id: Optional[str] = None) -> List[ImportJob]:
        with self.session_factory() as db:
            query = db.query(ImportJob)
            if account_id:
                query = query.filter(ImportJob.account_id == account_id)
            return query.order_by(ImportJob.created_at, ImportJob.id).all()

    def advance(
        self,
        job_id: str,
        status: str,
        processed_emails: Optional[int] = None,
        log_entry: Optional[Dict[str, str]] = None,
    ) -> ImportJob:
        """Update status, processed count and logs in one transaction.

        ``completed_at`` is stamped the first time the job reaches
        ``completed`` or ``stopped``.
        """
        with self.session_factory() as db:
            job = db.get(ImportJob, job_id, with_for_update=True)
            if job is None:
                raise JobNotFound(job_id)

            if processed_emails is not None:
                if processed_emails < job.processed_emails or processed_emails > job.total_emails:
                    raise ValueError(
                        f"processed_emails for job {job_id} must stay within "
                        f"[{job.processed_emails}, {job.total_emails}], got {processed_emails}"
                    )
                job.processed_emails = processed_emails

            if log_entry is not None:
                job.logs = [*job.logs, log_entry]

            job.status = status
            if status in JobStatus.TERMINAL and job.completed_at is None:
                job.completed_at = datetime.utcnow()

            db.commit()
            db.refresh(job)
            return job

    def reconcile_orphans(self) -> int:
        """Stop every job left active by a previous process.

        Their job contexts died with that process, so none of them can be
        resumed or finished.
        """
        with self.session_factory() as db:
            orphans = db.query(ImportJob).filter(ImportJob.status.in_(JobStatus.ACTIVE)).all()
            now = datetime.utcnow()
            for job in orphans:
                job.status = JobStatus.STOPPED
                job.completed_at = job.completed_at or now
            db.commit()

        if orphans:
            logger.warning(f"Marked {len(orphans)} orphaned import jobs as stopped")
        return len(orphans)
