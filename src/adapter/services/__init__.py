from .unit_of_work import SqlAlchemyUnitOfWork
from .job_queue import InMemoryJobQueue
from .billing_trigger import QueuedBillingTrigger
from .event_tracker import QueuedEventTracker
from .job_handlers import (
    LoggingJobHandler,
    WebhookJobHandler,
    CompositeJobHandler,
    create_job_handler,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "InMemoryJobQueue",
    "QueuedBillingTrigger",
    "QueuedEventTracker",
    "LoggingJobHandler",
    "WebhookJobHandler",
    "CompositeJobHandler",
    "create_job_handler",
]
