from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.plan_repository import SqlAlchemyPlanRepository
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.services.billing_trigger import QueuedBillingTrigger
from src.adapter.services.event_tracker import QueuedEventTracker
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.job_queue import JobQueue
from src.app.use_cases.subscriptions import CreateSubscription


def create_session_factory(db_uri: Optional[str] = None) -> Tuple[AsyncEngine, sessionmaker]:
    """Engine and session factory for db_uri (defaults to ApplicationConfig.DB_URI)"""
    engine = create_async_engine(db_uri or ApplicationConfig.DB_URI, echo=False, future=True)
    session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    return engine, session_factory


def build_create_subscription(
    session: AsyncSession,
    job_queue: JobQueue,
    tracking_enabled: bool = ApplicationConfig.TRACKING_ENABLED,
) -> CreateSubscription:
    """Wire CreateSubscription to a session and a job queue"""
    return CreateSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        customer_repo=SqlAlchemyCustomerRepository(session),
        plan_repo=SqlAlchemyPlanRepository(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        billing_trigger=QueuedBillingTrigger(job_queue),
        event_tracker=QueuedEventTracker(job_queue, enabled=tracking_enabled),
    )
