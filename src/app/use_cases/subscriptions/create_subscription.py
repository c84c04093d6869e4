"""CreateSubscription Use Case

Creates a customer's first subscription, or applies a plan change to the
customer's active subscription.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.billing_trigger import BillingTrigger
from src.app.services.event_tracker import EventTracker
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.plan_repository import PlanRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.base import utcnow
from src.domain.customer import Customer
from src.domain.plan import Plan
from src.domain.subscription import Subscription, InvalidStatusTransition
from src.domain.subscription_transition import SubscriptionTransition, classify_transition
from .dtos import (
    CreateSubscriptionCommandDTO,
    CreateSubscriptionFromApiCommandDTO,
    SubscriptionResponseDTO,
)
from .errors import (
    CREATE_SUBSCRIPTION_FAILED,
    from_integrity_error,
    from_invalid_transition,
    missing_argument,
)

logger = logging.getLogger(__name__)

SUBSCRIPTION_CREATED_EVENT = "subscription_created"


@dataclass
class TransitionOutcome:
    """What a transition changed, as seen once it has been committed"""

    transition: SubscriptionTransition
    subscription: Subscription
    plan: Plan
    to_bill: List[Subscription] = field(default_factory=list)


class CreateSubscription:
    """
    Use Case: Create a subscription or change its plan

    Business Rules:
    1. No active subscription: create an active one dated today
    2. Same plan requested: return the active subscription untouched
    3. Plan with equal or higher yearly amount: upgrade immediately
       (terminate the current subscription, activate the new one)
    4. Plan with lower yearly amount: queue a pending downgrade and keep
       the current subscription active
    5. Upgrades and downgrades cancel a downgrade already queued
    6. Upgrades and downgrades keep the original subscription_date
    7. Billing is scheduled only after commit:
       - pay in advance plan started (create/upgrade): bill the new subscription
       - pay in arrear plan left by an upgrade: bill the old subscription
    8. One subscription_created event is tracked per successful call

    Flow:
    1. Resolve customer and plan (missing_argument if either is missing)
    2. Lock the customer's active subscription
    3. Classify and apply the transition in one transaction
    4. Schedule billing, track event
    5. Return the customer's subscription of record
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        plan_repo: PlanRepository,
        subscription_repo: SubscriptionRepository,
        billing_trigger: BillingTrigger,
        event_tracker: EventTracker,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.plan_repo = plan_repo
        self.subscription_repo = subscription_repo
        self.billing_trigger = billing_trigger
        self.event_tracker = event_tracker

    async def execute(self, command: CreateSubscriptionCommandDTO) -> Result[SubscriptionResponseDTO]:
        """
        Create or change a subscription from internal IDs

        Args:
            command: CreateSubscriptionCommandDTO with organization, customer and plan IDs

        Returns:
            Result[SubscriptionResponseDTO]: Subscription of record or error
        """
        try:
            customer = await self.customer_repo.get_by_id(
                command.customer_id, command.organization_id
            )
            if not customer:
                return Return.err(missing_argument("customer", "unable to find customer"))

            plan = await self.plan_repo.get_by_id(command.plan_id, command.organization_id)
            if not plan:
                return Return.err(missing_argument("plan", "plan does not exist"))

            return await self._process_create(plan, command.membership_id, customer=customer)

        except Exception as e:
            return self._failure(e)

    async def execute_from_api(
        self, command: CreateSubscriptionFromApiCommandDTO
    ) -> Result[SubscriptionResponseDTO]:
        """
        Create or change a subscription from external identifiers

        The customer is created on the fly when the organization does not
        know it yet. It is written in the same transaction as the subscription.

        Args:
            command: CreateSubscriptionFromApiCommandDTO with external customer id and plan code

        Returns:
            Result[SubscriptionResponseDTO]: Subscription of record or error
        """
        external_customer_id = (command.customer_id or "").strip()
        plan_code = (command.plan_code or "").strip()

        try:
            if not external_customer_id:
                return Return.err(missing_argument("customer", "unable to find customer"))

            plan = None
            if plan_code:
                plan = await self.plan_repo.get_by_code(command.organization_id, plan_code)
            if not plan:
                return Return.err(missing_argument("plan", "plan does not exist"))

            return await self._process_create(
                plan,
                command.membership_id,
                organization_id=command.organization_id,
                external_customer_id=external_customer_id,
            )

        except Exception as e:
            return self._failure(e)

    async def _process_create(
        self,
        plan: Plan,
        membership_id: Optional[str],
        customer: Optional[Customer] = None,
        organization_id: Optional[str] = None,
        external_customer_id: Optional[str] = None,
    ) -> Result[SubscriptionResponseDTO]:
        async with self.uow.transaction():
            if customer is None:
                customer = await self.customer_repo.get_or_create(
                    organization_id, external_customer_id
                )
            outcome = await self._handle_subscription(customer, plan)

        logger.info(
            f"Applied {outcome.transition.value} for customer {customer.id}: "
            f"subscription {outcome.subscription.id} on plan {outcome.plan.code}"
        )

        self._schedule_billing(outcome.to_bill)
        self._track_subscription_created(outcome, customer, membership_id)

        return Return.ok(self._to_response_dto(outcome.subscription, outcome.plan))

    async def _handle_subscription(self, customer: Customer, plan: Plan) -> TransitionOutcome:
        current_subscription = await self.subscription_repo.get_active_by_customer(
            customer.id, for_update=True
        )
        current_plan = None
        if current_subscription:
            current_plan = await self.plan_repo.get_by_id(current_subscription.plan_id)

        transition = classify_transition(current_plan, plan)

        if transition is SubscriptionTransition.CREATE:
            return await self._create_subscription(customer, plan)
        if transition is SubscriptionTransition.UPGRADE:
            return await self._upgrade_subscription(customer, current_subscription, current_plan, plan)
        if transition is SubscriptionTransition.DOWNGRADE:
            return await self._downgrade_subscription(customer, current_subscription, current_plan, plan)

        return TransitionOutcome(transition, current_subscription, current_plan)

    async def _create_subscription(self, customer: Customer, plan: Plan) -> TransitionOutcome:
        now = utcnow()
        new_subscription = Subscription(
            customer_id=customer.id,
            plan_id=plan.id,
            subscription_date=now.date(),
        )
        new_subscription.mark_as_active(now)
        new_subscription = await self.subscription_repo.create(new_subscription)

        to_bill = [new_subscription] if plan.pay_in_advance else []
        return TransitionOutcome(SubscriptionTransition.CREATE, new_subscription, plan, to_bill)

    async def _upgrade_subscription(
        self,
        customer: Customer,
        current_subscription: Subscription,
        current_plan: Plan,
        plan: Plan,
    ) -> TransitionOutcome:
        now = utcnow()
        await self._cancel_pending_subscription(current_subscription, now)

        # The current subscription is terminated before the new one is
        # inserted: only one active row per customer is accepted.
        current_subscription.mark_as_terminated(now)
        await self.subscription_repo.update(current_subscription)

        new_subscription = Subscription(
            customer_id=customer.id,
            plan_id=plan.id,
            previous_subscription_id=current_subscription.id,
            subscription_date=current_subscription.subscription_date,
        )
        new_subscription.mark_as_active(now)
        new_subscription = await self.subscription_repo.create(new_subscription)

        to_bill = []
        if current_plan.pay_in_arrear:
            to_bill.append(current_subscription)
        if plan.pay_in_advance:
            to_bill.append(new_subscription)

        return TransitionOutcome(SubscriptionTransition.UPGRADE, new_subscription, plan, to_bill)

    async def _downgrade_subscription(
        self,
        customer: Customer,
        current_subscription: Subscription,
        current_plan: Plan,
        plan: Plan,
    ) -> TransitionOutcome:
        now = utcnow()
        await self._cancel_pending_subscription(current_subscription, now)

        # The current subscription stays active until the next billing day,
        # the pending one is activated at that date.
        pending_subscription = Subscription(
            customer_id=customer.id,
            plan_id=plan.id,
            previous_subscription_id=current_subscription.id,
            subscription_date=current_subscription.subscription_date,
        )
        pending_subscription.mark_as_pending(now)
        await self.subscription_repo.create(pending_subscription)

        return TransitionOutcome(SubscriptionTransition.DOWNGRADE, current_subscription, current_plan)

    async def _cancel_pending_subscription(self, subscription: Subscription, now: datetime) -> None:
        pending_subscription = await self.subscription_repo.get_next_subscription(subscription.id)
        if not pending_subscription or not pending_subscription.is_pending:
            return

        pending_subscription.mark_as_canceled(now)
        await self.subscription_repo.update(pending_subscription)
        logger.info(
            f"Canceled pending subscription {pending_subscription.id} "
            f"queued after subscription {subscription.id}"
        )

    def _schedule_billing(self, subscriptions: List[Subscription]) -> None:
        timestamp = int(time.time())
        for subscription in subscriptions:
            try:
                self.billing_trigger.schedule(subscription, timestamp)
            except Exception as e:
                logger.error(f"Failed to schedule billing of subscription {subscription.id}: {e}")

    def _track_subscription_created(
        self,
        outcome: TransitionOutcome,
        customer: Customer,
        membership_id: Optional[str],
    ) -> None:
        subscription = outcome.subscription
        try:
            self.event_tracker.track(
                SUBSCRIPTION_CREATED_EVENT,
                {
                    "created_at": subscription.created_at.isoformat(),
                    "customer_id": subscription.customer_id,
                    "plan_code": outcome.plan.code,
                    "plan_name": outcome.plan.name,
                    "subscription_type": outcome.transition.subscription_type,
                    "organization_id": customer.organization_id,
                },
                membership_id=membership_id,
            )
        except Exception as e:
            logger.error(f"Failed to track {SUBSCRIPTION_CREATED_EVENT} for subscription {subscription.id}: {e}")

    def _failure(self, error: Exception) -> Result[SubscriptionResponseDTO]:
        if isinstance(error, IntegrityError):
            logger.warning(f"Subscription change rejected by constraint: {error.orig}")
            return Return.err(from_integrity_error(error))

        if isinstance(error, InvalidStatusTransition):
            logger.warning(f"Subscription change rejected: {error}")
            return Return.err(from_invalid_transition(error))

        logger.exception("Unexpected error while creating subscription")
        return Return.err(
            Error(
                code=CREATE_SUBSCRIPTION_FAILED,
                message="Failed to create subscription",
                reason=str(error),
            )
        )

    def _to_response_dto(self, subscription: Subscription, plan: Plan) -> SubscriptionResponseDTO:
        return SubscriptionResponseDTO(
            subscription_id=subscription.id,
            customer_id=subscription.customer_id,
            plan_id=subscription.plan_id,
            plan_code=plan.code,
            status=subscription.status,
            subscription_date=subscription.subscription_date,
            previous_subscription_id=subscription.previous_subscription_id,
            started_at=subscription.started_at,
            created_at=subscription.created_at,
        )
