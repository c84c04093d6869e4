"""Unit tests for Subscription domain entity"""

import pytest
from datetime import date, datetime, timedelta, timezone
from src.domain.subscription import (
    Subscription,
    SubscriptionStatus,
    InvalidStatusTransition,
)


def new_subscription() -> Subscription:
    return Subscription(customer_id=1, plan_id=1, subscription_date=date(2024, 1, 15))


class TestSubscriptionCreation:
    """Test Subscription entity creation"""

    def test_new_subscription_has_no_status(self):
        subscription = new_subscription()

        assert subscription.status is None
        assert subscription.previous_subscription_id is None
        assert subscription.started_at is None
        assert isinstance(subscription.created_at, datetime)
        assert subscription.created_at.tzinfo is not None
        assert subscription.updated_at.tzinfo is not None

    def test_mark_new_subscription_as_active(self):
        subscription = new_subscription()
        now = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)

        subscription.mark_as_active(now)

        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.started_at == now
        assert subscription.updated_at == now

    def test_mark_new_subscription_as_pending(self):
        subscription = new_subscription()

        subscription.mark_as_pending()

        assert subscription.status == SubscriptionStatus.PENDING
        assert subscription.is_pending
        assert subscription.started_at is None


class TestSubscriptionTransitions:
    """Test allowed and forbidden status transitions"""

    def test_active_subscription_can_be_terminated(self):
        subscription = new_subscription()
        subscription.mark_as_active()
        now = datetime(2024, 2, 1, tzinfo=timezone.utc)

        subscription.mark_as_terminated(now)

        assert subscription.status == SubscriptionStatus.TERMINATED
        assert subscription.terminated_at == now
        assert subscription.status != SubscriptionStatus.ACTIVE

    def test_pending_subscription_can_be_canceled(self):
        subscription = new_subscription()
        subscription.mark_as_pending()
        now = datetime(2024, 2, 1, tzinfo=timezone.utc)

        subscription.mark_as_canceled(now)

        assert subscription.status == SubscriptionStatus.CANCELED
        assert subscription.canceled_at == now

    def test_pending_subscription_can_be_activated(self):
        subscription = new_subscription()
        subscription.mark_as_pending()

        subscription.mark_as_active()

        assert subscription.status == SubscriptionStatus.ACTIVE

    def test_status_loaded_as_plain_string_is_accepted(self):
        subscription = new_subscription()
        subscription.status = "pending"

        subscription.mark_as_canceled()

        assert subscription.status == "canceled"

    def test_terminated_subscription_is_never_reactivated(self):
        subscription = new_subscription()
        subscription.mark_as_active()
        subscription.mark_as_terminated()

        with pytest.raises(InvalidStatusTransition) as exc_info:
            subscription.mark_as_active()

        assert exc_info.value.current == SubscriptionStatus.TERMINATED
        assert exc_info.value.target == SubscriptionStatus.ACTIVE

    def test_canceled_subscription_never_becomes_active(self):
        subscription = new_subscription()
        subscription.mark_as_pending()
        subscription.mark_as_canceled()

        with pytest.raises(InvalidStatusTransition):
            subscription.mark_as_active()

    def test_active_subscription_cannot_be_canceled(self):
        subscription = new_subscription()
        subscription.mark_as_active()

        with pytest.raises(InvalidStatusTransition):
            subscription.mark_as_canceled()

    def test_new_subscription_cannot_be_terminated(self):
        subscription = new_subscription()

        with pytest.raises(InvalidStatusTransition) as exc_info:
            subscription.mark_as_terminated()

        assert "from new to terminated" in str(exc_info.value)


class TestSubscriptionTimestamps:
    """Lifecycle timestamps default to timezone-aware UTC"""

    def test_default_timestamps_are_utc(self):
        subscription = new_subscription()
        subscription.mark_as_active()
        subscription.mark_as_terminated()

        assert subscription.started_at.utcoffset() == timedelta(0)
        assert subscription.terminated_at.utcoffset() == timedelta(0)
        assert subscription.updated_at == subscription.terminated_at

    def test_canceled_at_is_utc(self):
        subscription = new_subscription()
        subscription.mark_as_pending()
        subscription.mark_as_canceled()

        assert subscription.canceled_at.utcoffset() == timedelta(0)
