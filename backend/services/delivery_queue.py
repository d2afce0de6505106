"""
In-memory queue for webhook deliveries that run in the background.

A scheduled delivery is an asyncio.Task on the running loop; the caller gets
an id back immediately and polls get_status() for the outcome.

Usage::

    from services.delivery_queue import delivery_queue

    job_id = delivery_queue.schedule(simulator, "payment_intent.succeeded")
    info = delivery_queue.get_status(job_id)
    # info["status"] in {"running", "delivered", "undelivered", "failed"}
"""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from services.webhook_simulator import WebhookSimulator

logger = logging.getLogger(__name__)

FINISHED = ("delivered", "undelivered", "failed")


class _DeliveryJob:
    __slots__ = (
        "job_id",
        "event_type",
        "status",
        "error",
        "created_at",
        "completed_at",
        "_task",
    )

    def __init__(self, job_id: str, event_type: str) -> None:
        self.job_id = job_id
        self.event_type = event_type
        self.status = "running"  # running | delivered | undelivered | failed
        self.error: str | None = None
        self.created_at = datetime.now(UTC)
        self.completed_at: datetime | None = None
        self._task: asyncio.Task | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "event_type": self.event_type,
            "status": self.status,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


class DeliveryQueue:
    """Tracks background webhook deliveries by job id."""

    def __init__(self) -> None:
        self._jobs: dict[str, _DeliveryJob] = {}

    def schedule(self, simulator: WebhookSimulator, event_type: str) -> str:
        """
        Start delivering *event_type* in the background and return the job id.

        Must be called with a running event loop.
        """
        job = _DeliveryJob(str(uuid4()), event_type)
        self._jobs[job.job_id] = job
        job._task = asyncio.create_task(
            self._run(job, simulator), name=f"webhook-{job.job_id}"
        )
        logger.debug("delivery_queue: scheduled %s (%s)", job.job_id, event_type)
        return job.job_id

    def get_status(self, job_id: str) -> dict[str, Any] | None:
        job = self._jobs.get(job_id)
        return job.to_dict() if job else None

    async def wait(self, job_id: str) -> dict[str, Any] | None:
        """Wait for a job to finish and return its final status."""
        job = self._jobs.get(job_id)
        if job is None:
            return None
        if job._task is not None:
            await asyncio.shield(job._task)
        return job.to_dict()

    def cleanup_old(self, max_age_seconds: int = 3600) -> int:
        """Forget finished jobs older than *max_age_seconds*. Returns the count removed."""
        now = datetime.now(UTC)
        expired = [
            job_id
            for job_id, job in self._jobs.items()
            if job.status in FINISHED
            and job.completed_at is not None
            and (now - job.completed_at).total_seconds() > max_age_seconds
        ]
        for job_id in expired:
            del self._jobs[job_id]
        return len(expired)

    def stats(self) -> dict[str, int]:
        counts = {"running": 0, "delivered": 0, "undelivered": 0, "failed": 0}
        for job in self._jobs.values():
            counts[job.status] += 1
        return counts

    async def _run(self, job: _DeliveryJob, simulator: WebhookSimulator) -> None:
        try:
            delivered = await simulator.run(job.event_type)
            job.status = "delivered" if delivered else "undelivered"
        except Exception as exc:
            job.status = "failed"
            job.error = str(exc)
            logger.error("delivery_queue: job %s failed: %s", job.job_id, exc, exc_info=True)
        finally:
            job.completed_at = datetime.now(UTC)


delivery_queue = DeliveryQueue()


def schedule_delivery(simulator: WebhookSimulator, event_type: str) -> str:
    """Deliver *event_type* in the background on the shared queue."""
    return delivery_queue.schedule(simulator, event_type)
