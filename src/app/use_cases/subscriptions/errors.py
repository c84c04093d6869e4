"""Errors returned by subscription use cases"""

from typing import Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Error
from src.domain.subscription import InvalidStatusTransition

MISSING_ARGUMENT = "missing_argument"
VALIDATION_ERROR = "validation_error"
CREATE_SUBSCRIPTION_FAILED = "create_subscription_failed"

# constraint names (PostgreSQL) and column lists (SQLite) -> offending field
_CONSTRAINT_FIELDS = {
    "uq_subscriptions_customer_active": "customer_id",
    "subscriptions.customer_id": "customer_id",
    "uq_subscriptions_previous_pending": "previous_subscription_id",
    "subscriptions.previous_subscription_id": "previous_subscription_id",
    "uq_customers_organization_customer_id": "customer_id",
    "customers.customer_id": "customer_id",
}


def missing_argument(argument: str, message: str) -> Error:
    return Error(
        code=MISSING_ARGUMENT,
        message=message,
        reason=f"{argument} is required",
        details={"argument": argument},
    )


def validation_failed(errors: Dict[str, List[str]], reason: Optional[str] = None) -> Error:
    return Error(
        code=VALIDATION_ERROR,
        message="Validation error on the record",
        reason=reason,
        details=errors,
    )


def from_integrity_error(error: IntegrityError) -> Error:
    """Map a constraint violation to field-level validation errors"""
    message = str(error.orig)
    for marker, field in _CONSTRAINT_FIELDS.items():
        if marker in message:
            return validation_failed({field: ["value_already_exist"]}, reason=message)
    return validation_failed({"base": ["constraint_violation"]}, reason=message)


def from_invalid_transition(error: InvalidStatusTransition) -> Error:
    return validation_failed({"status": ["invalid_transition"]}, reason=str(error))
