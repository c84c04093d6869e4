"""Data Transfer Objects for Subscription Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class CreateSubscriptionCommandDTO(BaseModel):
    """
    Command DTO for creating or changing a subscription by internal IDs

    Used as input to CreateSubscription.execute.
    """

    organization_id: str = Field(
        ...,
        description="Organization owning the customer and the plan"
    )

    customer_id: int = Field(
        ...,
        description="Internal customer ID"
    )

    plan_id: int = Field(
        ...,
        description="Internal ID of the requested plan"
    )

    membership_id: Optional[str] = Field(
        default=None,
        description="Organization member performing the change (reported in tracking)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "organization_id": "org_123",
                "customer_id": 42,
                "plan_id": 3,
                "membership_id": "membership_7"
            }
        }


class CreateSubscriptionFromApiCommandDTO(BaseModel):
    """
    Command DTO for creating or changing a subscription by external identifiers

    Used as input to CreateSubscription.execute_from_api. The customer is
    created if the organization does not know it yet.
    """

    organization_id: str = Field(
        ...,
        description="Organization owning the customer and the plan"
    )

    customer_id: Optional[str] = Field(
        default=None,
        description="Customer identifier known to the organization"
    )

    plan_code: Optional[str] = Field(
        default=None,
        description="Code of the requested plan"
    )

    membership_id: Optional[str] = Field(
        default=None,
        description="Organization member performing the change (reported in tracking)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "organization_id": "org_123",
                "customer_id": "cus_external_42",
                "plan_code": "gold",
                "membership_id": None
            }
        }


class SubscriptionResponseDTO(BaseModel):
    """
    Response DTO for subscription operations

    Describes the customer's subscription of record after the call: the new
    active subscription on create/upgrade, the still-active one on downgrade.
    """

    subscription_id: int = Field(
        ...,
        description="Subscription ID"
    )

    customer_id: int = Field(
        ...,
        description="Internal customer ID"
    )

    plan_id: int = Field(
        ...,
        description="Plan ID"
    )

    plan_code: str = Field(
        ...,
        description="Plan code"
    )

    status: str = Field(
        ...,
        description="Subscription status"
    )

    subscription_date: date = Field(
        ...,
        description="Date the customer commercially subscribed"
    )

    previous_subscription_id: Optional[int] = Field(
        default=None,
        description="Subscription replaced by this one"
    )

    started_at: Optional[datetime] = Field(
        default=None,
        description="When the subscription became active"
    )

    created_at: datetime = Field(
        ...,
        description="Subscription creation timestamp"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "subscription_id": 10,
                "customer_id": 42,
                "plan_id": 3,
                "plan_code": "gold",
                "status": "active",
                "subscription_date": "2024-01-01",
                "previous_subscription_id": 9,
                "started_at": "2024-03-01T00:00:00Z",
                "created_at": "2024-03-01T00:00:00Z"
            }
        }
