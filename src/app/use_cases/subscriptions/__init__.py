"""Subscription lifecycle use cases"""
from .create_subscription import CreateSubscription, SUBSCRIPTION_CREATED_EVENT
from .dtos import (
    CreateSubscriptionCommandDTO,
    CreateSubscriptionFromApiCommandDTO,
    SubscriptionResponseDTO,
)
from .errors import MISSING_ARGUMENT, VALIDATION_ERROR, CREATE_SUBSCRIPTION_FAILED

__all__ = [
    "CreateSubscription",
    "SUBSCRIPTION_CREATED_EVENT",
    "CreateSubscriptionCommandDTO",
    "CreateSubscriptionFromApiCommandDTO",
    "SubscriptionResponseDTO",
    "MISSING_ARGUMENT",
    "VALIDATION_ERROR",
    "CREATE_SUBSCRIPTION_FAILED",
]
