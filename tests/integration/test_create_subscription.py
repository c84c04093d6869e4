"""Integration tests for CreateSubscription use case

Tests cover:
- Subscription chains built by create, upgrade and downgrade
- At most one active subscription per customer
- Pending downgrades superseded by later changes
- Customers created on the fly from external identifiers
- Database constraints surfacing as validation errors
- Jobs queued for billing and tracking
"""

import pytest
from datetime import timedelta
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.services.billing_trigger import QueuedBillingTrigger
from src.adapter.services.event_tracker import QueuedEventTracker
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.repositories.plan_repository import SqlAlchemyPlanRepository
from src.app.use_cases.subscriptions import CreateSubscription
from src.app.use_cases.subscriptions.dtos import (
    CreateSubscriptionCommandDTO,
    CreateSubscriptionFromApiCommandDTO,
)
from src.domain.subscription import SubscriptionStatus


def _command(customer_id, plan_id):
    return CreateSubscriptionCommandDTO(
        organization_id="org_1",
        customer_id=customer_id,
        plan_id=plan_id,
        membership_id="mem_1",
    )


def _drain(job_queue):
    jobs = []
    while not job_queue.empty():
        jobs.append(job_queue.get_nowait())
        job_queue.task_done()
    return jobs


class _BlindSubscriptionRepository(SqlAlchemySubscriptionRepository):
    """Never sees the active subscription, so only the database guards uniqueness"""

    async def get_active_by_customer(self, customer_id, for_update=False):
        return None


@pytest.mark.asyncio
class TestCreateSubscriptionIntegration:
    """Integration tests with real database"""

    async def test_first_subscription_is_active(self, db_session: AsyncSession, use_case, customer, plans, job_queue):
        result = await use_case.execute(_command(customer.id, plans["silver"].id))

        assert result.is_ok()
        assert result.value.status == SubscriptionStatus.ACTIVE.value
        assert result.value.plan_code == "silver"
        assert result.value.previous_subscription_id is None

        subscriptions = await SqlAlchemySubscriptionRepository(db_session).list_by_customer(customer.id)
        assert len(subscriptions) == 1
        assert subscriptions[0].started_at is not None

        await db_session.refresh(subscriptions[0])
        assert subscriptions[0].started_at.utcoffset() == timedelta(0)
        assert subscriptions[0].created_at.utcoffset() == timedelta(0)

        # Pay in arrear: nothing to bill yet
        jobs = _drain(job_queue)
        assert [job.name for job in jobs] == ["track_event"]
        assert jobs[0].payload["properties"]["subscription_type"] == "create"
        assert jobs[0].payload["membership_id"] == "mem_1"

    async def test_pay_in_advance_subscription_is_billed(self, use_case, customer, plans, job_queue):
        result = await use_case.execute(_command(customer.id, plans["gold"].id))

        assert result.is_ok()
        jobs = _drain(job_queue)
        assert [job.name for job in jobs] == ["bill_subscription", "track_event"]
        assert jobs[0].payload["subscription_id"] == result.value.subscription_id

    async def test_same_plan_reuses_active_subscription(self, db_session: AsyncSession, use_case, customer, plans, job_queue):
        first = await use_case.execute(_command(customer.id, plans["gold"].id))
        _drain(job_queue)

        second = await use_case.execute(_command(customer.id, plans["gold"].id))

        assert second.is_ok()
        assert second.value.subscription_id == first.value.subscription_id
        subscriptions = await SqlAlchemySubscriptionRepository(db_session).list_by_customer(customer.id)
        assert len(subscriptions) == 1

        jobs = _drain(job_queue)
        assert [job.name for job in jobs] == ["track_event"]
        assert jobs[0].payload["properties"]["subscription_type"] == "create"

    async def test_upgrade_replaces_active_subscription(self, db_session: AsyncSession, use_case, customer, plans, job_queue):
        """
        Given an active pay in arrear subscription
        When the customer moves to a more expensive pay in advance plan
        Then the old one is terminated, the new one is active, and both are billed
        """
        silver = await use_case.execute(_command(customer.id, plans["silver"].id))
        _drain(job_queue)

        result = await use_case.execute(_command(customer.id, plans["gold"].id))

        assert result.is_ok()
        assert result.value.plan_code == "gold"
        assert result.value.previous_subscription_id == silver.value.subscription_id
        assert result.value.subscription_date == silver.value.subscription_date

        repo = SqlAlchemySubscriptionRepository(db_session)
        old = await repo.get_by_id(silver.value.subscription_id)
        assert old.status == SubscriptionStatus.TERMINATED.value
        assert old.terminated_at is not None
        assert (await repo.get_active_by_customer(customer.id)).id == result.value.subscription_id
        assert (await repo.get_next_subscription(old.id)).id == result.value.subscription_id

        jobs = _drain(job_queue)
        billed = [job.payload["subscription_id"] for job in jobs if job.name == "bill_subscription"]
        assert billed == [silver.value.subscription_id, result.value.subscription_id]
        assert jobs[-1].payload["properties"]["subscription_type"] == "upgrade"

    async def test_downgrade_keeps_current_subscription_active(self, db_session: AsyncSession, use_case, customer, plans, job_queue):
        gold = await use_case.execute(_command(customer.id, plans["gold"].id))
        _drain(job_queue)

        result = await use_case.execute(_command(customer.id, plans["silver"].id))

        assert result.is_ok()
        assert result.value.subscription_id == gold.value.subscription_id
        assert result.value.status == SubscriptionStatus.ACTIVE.value

        repo = SqlAlchemySubscriptionRepository(db_session)
        pending = await repo.get_next_subscription(gold.value.subscription_id)
        assert pending.is_pending
        assert pending.plan_id == plans["silver"].id
        assert pending.subscription_date == gold.value.subscription_date
        assert (await repo.get_active_by_customer(customer.id)).id == gold.value.subscription_id

        jobs = _drain(job_queue)
        assert [job.name for job in jobs] == ["track_event"]
        properties = jobs[0].payload["properties"]
        assert properties["subscription_type"] == "downgrade"
        assert properties["plan_code"] == "gold"

    async def test_second_downgrade_cancels_first(self, db_session: AsyncSession, use_case, customer, plans):
        gold = await use_case.execute(_command(customer.id, plans["gold"].id))
        await use_case.execute(_command(customer.id, plans["silver"].id))
        await use_case.execute(_command(customer.id, plans["bronze"].id))

        subscriptions = await SqlAlchemySubscriptionRepository(db_session).list_by_customer(customer.id)
        statuses = {s.plan_id: s.status for s in subscriptions}
        assert statuses == {
            plans["gold"].id: SubscriptionStatus.ACTIVE.value,
            plans["silver"].id: SubscriptionStatus.CANCELED.value,
            plans["bronze"].id: SubscriptionStatus.PENDING.value,
        }
        assert all(
            s.previous_subscription_id == gold.value.subscription_id
            for s in subscriptions if s.id != gold.value.subscription_id
        )

    async def test_upgrade_cancels_pending_downgrade(self, db_session: AsyncSession, use_case, customer, plans):
        """Equal yearly amount counts as an upgrade and supersedes the queued downgrade"""
        gold = await use_case.execute(_command(customer.id, plans["gold"].id))
        await use_case.execute(_command(customer.id, plans["silver"].id))

        result = await use_case.execute(_command(customer.id, plans["gold_yearly"].id))

        assert result.is_ok()
        assert result.value.plan_code == "gold_yearly"

        subscriptions = await SqlAlchemySubscriptionRepository(db_session).list_by_customer(customer.id)
        statuses = [(s.plan_id, s.status) for s in subscriptions]
        assert statuses == [
            (plans["gold"].id, SubscriptionStatus.TERMINATED.value),
            (plans["silver"].id, SubscriptionStatus.CANCELED.value),
            (plans["gold_yearly"].id, SubscriptionStatus.ACTIVE.value),
        ]
        assert [s.id for s in subscriptions if s.status == SubscriptionStatus.ACTIVE.value] == [
            result.value.subscription_id
        ]
        assert result.value.previous_subscription_id == gold.value.subscription_id

    async def test_from_api_creates_customer(self, db_session: AsyncSession, use_case, plans):
        result = await use_case.execute_from_api(
            CreateSubscriptionFromApiCommandDTO(
                organization_id="org_1",
                customer_id="  cus_new ",
                plan_code=" silver ",
            )
        )

        assert result.is_ok()
        customer = await SqlAlchemyCustomerRepository(db_session).get_by_external_id("org_1", "cus_new")
        assert customer is not None
        assert result.value.customer_id == customer.id

        again = await use_case.execute_from_api(
            CreateSubscriptionFromApiCommandDTO(
                organization_id="org_1", customer_id="cus_new", plan_code="silver"
            )
        )
        assert again.value.subscription_id == result.value.subscription_id

    async def test_from_api_unknown_plan_creates_nothing(self, db_session: AsyncSession, use_case, plans):
        result = await use_case.execute_from_api(
            CreateSubscriptionFromApiCommandDTO(
                organization_id="org_1", customer_id="cus_new", plan_code="platinum"
            )
        )

        assert result.is_err()
        assert result.error.code == "missing_argument"
        assert result.error.details == {"argument": "plan"}
        customer = await SqlAlchemyCustomerRepository(db_session).get_by_external_id("org_1", "cus_new")
        assert customer is None

    async def test_database_rejects_second_active_subscription(self, db_session: AsyncSession, use_case, customer, plans, job_queue):
        """
        Given an active subscription the use case cannot see
        When another subscription is created
        Then the unique index rejects it and nothing changes
        """
        customer_id = customer.id
        gold_id = plans["gold"].id
        silver_id = plans["silver"].id
        existing = await use_case.execute(_command(customer_id, silver_id))
        _drain(job_queue)

        blind = CreateSubscription(
            uow=SqlAlchemyUnitOfWork(db_session),
            customer_repo=SqlAlchemyCustomerRepository(db_session),
            plan_repo=SqlAlchemyPlanRepository(db_session),
            subscription_repo=_BlindSubscriptionRepository(db_session),
            billing_trigger=QueuedBillingTrigger(job_queue),
            event_tracker=QueuedEventTracker(job_queue),
        )
        result = await blind.execute(_command(customer_id, gold_id))

        assert result.is_err()
        assert result.error.code == "validation_error"
        assert result.error.details == {"customer_id": ["value_already_exist"]}

        subscriptions = await SqlAlchemySubscriptionRepository(db_session).list_by_customer(customer_id)
        assert [(s.id, s.status) for s in subscriptions] == [
            (existing.value.subscription_id, SubscriptionStatus.ACTIVE.value)
        ]
        assert job_queue.empty()

    async def test_missing_customer_returns_error(self, use_case, plans):
        result = await use_case.execute(_command(999, plans["gold"].id))

        assert result.is_err()
        assert result.error.code == "missing_argument"
        assert result.error.message == "unable to find customer"

    async def test_plan_change_chain_keeps_one_active_subscription(self, db_session: AsyncSession, use_case, customer, plans, job_queue):
        """
        Given a customer moving through gold, silver, gold, gold_yearly, bronze, gold
        When every change is applied in turn
        Then one subscription stays active, all share the first subscription_date,
        and only advance starts and arrear exits are billed
        """
        customer_id = customer.id
        results = []
        for code in ("gold", "silver", "gold", "gold_yearly", "bronze", "gold"):
            result = await use_case.execute(_command(customer_id, plans[code].id))
            assert result.is_ok()
            results.append(result.value)

        subscriptions = await SqlAlchemySubscriptionRepository(db_session).list_by_customer(customer_id)
        assert [(s.plan_id, s.status) for s in subscriptions] == [
            (plans["gold"].id, SubscriptionStatus.TERMINATED.value),
            (plans["silver"].id, SubscriptionStatus.CANCELED.value),
            (plans["gold_yearly"].id, SubscriptionStatus.TERMINATED.value),
            (plans["bronze"].id, SubscriptionStatus.CANCELED.value),
            (plans["gold"].id, SubscriptionStatus.ACTIVE.value),
        ]
        assert {s.subscription_date for s in subscriptions} == {results[0].subscription_date}
        assert results[-1].subscription_id == subscriptions[-1].id

        jobs = _drain(job_queue)
        billed = [job.payload["subscription_id"] for job in jobs if job.name == "bill_subscription"]
        assert billed == [subscriptions[0].id, subscriptions[2].id, subscriptions[4].id]
        assert [job.name for job in jobs].count("track_event") == 6
