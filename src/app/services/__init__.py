from .unit_of_work import UnitOfWork
from .job_queue import Job, JobQueue
from .job_handler import JobHandler
from .billing_trigger import BillingTrigger, BILL_SUBSCRIPTION_JOB
from .event_tracker import EventTracker, TRACK_EVENT_JOB

__all__ = [
    "UnitOfWork",
    "Job",
    "JobQueue",
    "JobHandler",
    "BillingTrigger",
    "BILL_SUBSCRIPTION_JOB",
    "EventTracker",
    "TRACK_EVENT_JOB",
]
