"""Background workers for subscription jobs"""
from .subscription_jobs import SubscriptionJobWorker, create_job_worker

__all__ = ["SubscriptionJobWorker", "create_job_worker"]
