"""Plan Domain Entity

A billing plan offered by an organization.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, String, UniqueConstraint
from src.domain.base import BaseModel, BigIntegerPK, UTCDateTime, utcnow


class Plan(BaseModel, table=True):
    """
    Plan - Recurring price a customer subscribes to

    Domain Rules:
    - code is unique within an organization
    - yearly_amount_cents is only used to compare plans (upgrade vs downgrade)
    - pay_in_advance plans bill at the start of a period, others in arrear
    - Immutable from the subscription lifecycle's point of view
    """

    __tablename__ = "plans"
    __table_args__ = (
        UniqueConstraint("organization_id", "code", name="uq_plans_organization_code"),
    )

    id: int = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique plan identifier (auto-increment)"
    )

    organization_id: str = Field(
        index=True,
        description="Owning organization"
    )

    code: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Plan code, unique per organization"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Human readable plan name"
    )

    yearly_amount_cents: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Yearly price in cents"
    )

    amount_currency: str = Field(
        default="EUR",
        sa_column=Column(String(3), nullable=False, default="EUR"),
        description="ISO 4217 currency code"
    )

    pay_in_advance: bool = Field(
        default=False,
        description="Bill at the beginning of the period instead of the end"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Plan creation timestamp"
    )

    @property
    def pay_in_arrear(self) -> bool:
        return not self.pay_in_advance

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "organization_id": "org_123",
                "code": "gold",
                "name": "Gold",
                "yearly_amount_cents": 24000,
                "amount_currency": "EUR",
                "pay_in_advance": True,
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
