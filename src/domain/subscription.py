"""Subscription Domain Entity

Tracks which plan a customer is subscribed to and how subscriptions replace
each other over time.
"""

from datetime import datetime, date
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, ForeignKey, String, text
from src.domain.base import BaseModel, BigIntegerPK, UTCDateTime, utcnow


class SubscriptionStatus(str, Enum):
    """Subscription status types"""
    PENDING = "pending"
    ACTIVE = "active"
    TERMINATED = "terminated"
    CANCELED = "canceled"


_ALLOWED_TRANSITIONS = {
    None: {SubscriptionStatus.ACTIVE, SubscriptionStatus.PENDING},
    SubscriptionStatus.PENDING: {SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELED},
    SubscriptionStatus.ACTIVE: {SubscriptionStatus.TERMINATED},
}


class InvalidStatusTransition(Exception):
    """Raised when a subscription is moved to a status it cannot reach"""

    def __init__(self, current: Optional[SubscriptionStatus], target: SubscriptionStatus):
        self.current = current
        self.target = target
        source = current.value if current else "new"
        super().__init__(f"Cannot move subscription from {source} to {target.value}")


class Subscription(BaseModel, table=True):
    """
    Subscription - A customer's subscription to a plan

    Domain Rules:
    - At most one active subscription per customer (partial unique index)
    - At most one pending successor per subscription (partial unique index)
    - Status transitions: new -> active/pending, pending -> active/canceled,
      active -> terminated. Terminated and canceled are final.
    - subscription_date is kept unchanged when a subscription replaces another
    - previous_subscription_id points to the subscription this one replaces
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index('ix_subscriptions_customer_id', 'customer_id'),
        Index('ix_subscriptions_previous_subscription_id', 'previous_subscription_id'),
        Index(
            'uq_subscriptions_customer_active',
            'customer_id',
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index(
            'uq_subscriptions_previous_pending',
            'previous_subscription_id',
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    id: int = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique subscription identifier (auto-increment)"
    )

    customer_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("customers.id"), nullable=False),
        description="Owning customer"
    )

    plan_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("plans.id"), nullable=False),
        description="Plan in effect for this subscription"
    )

    status: SubscriptionStatus = Field(
        default=None,
        sa_column=Column(String(20), nullable=False),
        description="Subscription status (pending, active, terminated, canceled)"
    )

    subscription_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Date the customer commercially subscribed"
    )

    previous_subscription_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, ForeignKey("subscriptions.id"), nullable=True),
        description="Subscription replaced by this one"
    )

    started_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(UTCDateTime, nullable=True),
        description="When the subscription became active"
    )

    terminated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(UTCDateTime, nullable=True),
        description="When the subscription was terminated"
    )

    canceled_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(UTCDateTime, nullable=True),
        description="When the pending subscription was canceled"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Subscription creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Last update timestamp"
    )

    @property
    def is_pending(self) -> bool:
        return self.status == SubscriptionStatus.PENDING

    def mark_as_active(self, at: Optional[datetime] = None) -> None:
        at = at or utcnow()
        self._transition_to(SubscriptionStatus.ACTIVE, at)
        self.started_at = at

    def mark_as_pending(self, at: Optional[datetime] = None) -> None:
        self._transition_to(SubscriptionStatus.PENDING, at or utcnow())

    def mark_as_terminated(self, at: Optional[datetime] = None) -> None:
        at = at or utcnow()
        self._transition_to(SubscriptionStatus.TERMINATED, at)
        self.terminated_at = at

    def mark_as_canceled(self, at: Optional[datetime] = None) -> None:
        at = at or utcnow()
        self._transition_to(SubscriptionStatus.CANCELED, at)
        self.canceled_at = at

    def _transition_to(self, target: SubscriptionStatus, at: datetime) -> None:
        # status comes back from the database as a plain string
        current = SubscriptionStatus(self.status) if self.status is not None else None
        if target not in _ALLOWED_TRANSITIONS.get(current, set()):
            raise InvalidStatusTransition(current, target)
        self.status = target.value
        self.updated_at = at

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "customer_id": 42,
                "plan_id": 3,
                "status": "active",
                "subscription_date": "2024-01-01",
                "previous_subscription_id": None,
                "started_at": "2024-01-01T00:00:00Z",
                "terminated_at": None,
                "canceled_at": None,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
