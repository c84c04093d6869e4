"""Customer Domain Entity

A billable customer of an organization, identified externally by customer_id.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String, UniqueConstraint
from src.domain.base import BaseModel, BigIntegerPK, UTCDateTime, utcnow


class Customer(BaseModel, table=True):
    """
    Customer - Owner of subscriptions

    Domain Rules:
    - customer_id is the identifier known to the organization's own systems
    - (organization_id, customer_id) is unique
    - A customer owns zero or more subscriptions, at most one active
    """

    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("organization_id", "customer_id", name="uq_customers_organization_customer_id"),
    )

    id: int = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Internal customer identifier (auto-increment)"
    )

    organization_id: str = Field(
        index=True,
        description="Owning organization"
    )

    customer_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="External customer identifier, unique per organization"
    )

    name: Optional[str] = Field(
        default=None,
        description="Display name"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Customer creation timestamp"
    )
