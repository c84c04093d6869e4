"""Plan change classification

Decides what happens when a customer asks for a plan, given the plan of the
customer's active subscription.
"""

from enum import Enum
from typing import Optional
from src.domain.plan import Plan


class SubscriptionTransition(str, Enum):
    """How a plan request is applied"""
    CREATE = "create"
    REUSE = "reuse"
    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"

    @property
    def subscription_type(self) -> str:
        """Tag reported in tracking events. Reusing counts as a create."""
        if self is SubscriptionTransition.REUSE:
            return SubscriptionTransition.CREATE.value
        return self.value


def classify_transition(current_plan: Optional[Plan], target_plan: Plan) -> SubscriptionTransition:
    """
    Classify a plan request

    Rules, in order:
    1. No active subscription -> CREATE
    2. Same plan as the active subscription -> REUSE
    3. Target yearly amount >= current yearly amount -> UPGRADE
       (a different plan at the same price is an upgrade)
    4. Otherwise -> DOWNGRADE

    Args:
        current_plan: Plan of the customer's active subscription, None if there is none
        target_plan: Requested plan

    Returns:
        SubscriptionTransition to apply
    """
    if current_plan is None:
        return SubscriptionTransition.CREATE

    if target_plan.id == current_plan.id:
        return SubscriptionTransition.REUSE

    if target_plan.yearly_amount_cents >= current_plan.yearly_amount_cents:
        return SubscriptionTransition.UPGRADE

    return SubscriptionTransition.DOWNGRADE
