"""Integration tests for the store credit lifecycle

Tests cover:
- Allocation, authorize, capture, credit and void against a real database
- user_total_amount snapshots across a user's store credits
- Credit to a new allocation
- Destroy
- Cumulative credit limits and voids of consumed holds
- Reconciliation of the resulting event history, directly and through the worker
"""

import pytest
from decimal import Decimal

from src.app.use_cases.store_credit import (
    AuthorizeCommandDTO,
    CaptureCommandDTO,
    CreateStoreCreditCommandDTO,
    CreditCommandDTO,
    OriginatorDTO,
    VoidCommandDTO,
)
from src.domain.payment import Order, OrderPaymentState, Payment, PaymentState
from src.worker.store_credit_reconciler import StoreCreditReconcilerWorker


async def _create(use_cases, seed, amount: str, user_id: int = 42, category: str = "exchange"):
    result = await use_cases.create.execute(
        CreateStoreCreditCommandDTO(
            user_id=user_id,
            created_by_id=1,
            category_id=seed[category],
            amount=Decimal(amount),
            currency="USD",
            originator=OriginatorDTO(type="AdminUser", id="1"),
        )
    )
    assert result.is_ok(), result
    return result.value


async def _authorize(use_cases, store_credit_id: int, amount: str):
    return await use_cases.authorize.execute(
        AuthorizeCommandDTO(store_credit_id=store_credit_id, amount=Decimal(amount), currency="USD")
    )


@pytest.mark.asyncio
class TestStoreCreditLifecycle:

    async def test_authorize_capture_credit(self, use_cases, seed):
        """
        Given: 100.00 USD store credit
        When: 50.00 is authorized, captured, then 20.00 credited back
        Then: Balances follow each step and four events are recorded in order
        """
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        assert created.event.action == "allocation"
        assert created.event.user_total_amount == Decimal("100.00")

        # Act - authorize
        authorized = await _authorize(use_cases, store_credit_id, "50.00")

        # Assert
        assert authorized.is_ok(), authorized
        assert authorized.value.store_credit.amount_authorized == Decimal("50.00")
        assert authorized.value.store_credit.amount_remaining == Decimal("50.00")
        auth_code = authorized.value.event.authorization_code
        assert auth_code.startswith(f"{store_credit_id}-SC-")

        # Act - capture
        captured = await use_cases.capture.execute(
            CaptureCommandDTO(
                store_credit_id=store_credit_id, amount=Decimal("50.00"), authorization_code=auth_code, currency="USD"
            )
        )

        # Assert
        assert captured.is_ok(), captured
        assert captured.value.store_credit.amount_used == Decimal("50.00")
        assert captured.value.store_credit.amount_authorized == Decimal("0.00")

        # Act - credit back part of the capture
        credited = await use_cases.credit.execute(
            CreditCommandDTO(
                store_credit_id=store_credit_id, amount=Decimal("20.00"), authorization_code=auth_code, currency="USD"
            )
        )

        # Assert
        assert credited.is_ok(), credited
        assert credited.value.store_credit.id == store_credit_id
        assert credited.value.store_credit.amount_used == Decimal("30.00")

        fetched = await use_cases.get.execute(store_credit_id)
        assert fetched.value.amount_remaining == Decimal("70.00")

        events = await use_cases.list_events.execute(store_credit_id)
        assert events.value.total == 4
        assert [e.action for e in events.value.events] == ["credit", "capture", "authorize", "allocation"]

    async def test_rejected_authorization_leaves_store_credit_usable(self, use_cases, seed):
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id

        # Act
        rejected = await _authorize(use_cases, store_credit_id, "100.01")
        accepted = await _authorize(use_cases, store_credit_id, "100.00")

        # Assert
        assert rejected.is_err()
        assert rejected.error.code == "INSUFFICIENT_FUNDS"
        assert accepted.is_ok(), accepted
        assert accepted.value.store_credit.amount_remaining == Decimal("0.00")

    async def test_repeated_authorization_code_is_idempotent(self, use_cases, seed):
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        first = await _authorize(use_cases, store_credit_id, "40.00")

        # Act
        retry = await use_cases.authorize.execute(
            AuthorizeCommandDTO(
                store_credit_id=store_credit_id,
                amount=Decimal("40.00"),
                currency="USD",
                authorization_code=first.value.event.authorization_code,
            )
        )

        # Assert
        assert retry.is_ok(), retry
        assert retry.value.event.id == first.value.event.id
        fetched = await use_cases.get.execute(store_credit_id)
        assert fetched.value.amount_authorized == Decimal("40.00")

    async def test_void_twice_fails(self, use_cases, seed):
        """
        Given: 30.00 authorized
        When: The authorization is voided twice
        Then: First void releases the hold, second returns UNABLE_TO_VOID
        """
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "30.00")
        auth_code = authorized.value.event.authorization_code

        # Act
        first = await use_cases.void.execute(VoidCommandDTO(store_credit_id=store_credit_id, authorization_code=auth_code))
        second = await use_cases.void.execute(VoidCommandDTO(store_credit_id=store_credit_id, authorization_code=auth_code))

        # Assert
        assert first.is_ok(), first
        assert first.value.store_credit.amount_authorized == Decimal("0.00")
        assert first.value.event.amount == Decimal("30.00")
        assert second.is_err()
        assert second.error.code == "UNABLE_TO_VOID"

        events = await use_cases.list_events.execute(store_credit_id)
        assert events.value.total == 3

    async def test_credit_more_than_captured_fails(self, use_cases, seed):
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "50.00")
        auth_code = authorized.value.event.authorization_code
        await use_cases.capture.execute(
            CaptureCommandDTO(
                store_credit_id=store_credit_id, amount=Decimal("50.00"), authorization_code=auth_code, currency="USD"
            )
        )

        # Act
        result = await use_cases.credit.execute(
            CreditCommandDTO(
                store_credit_id=store_credit_id, amount=Decimal("50.01"), authorization_code=auth_code, currency="USD"
            )
        )

        # Assert
        assert result.is_err()
        assert result.error.code == "UNABLE_TO_CREDIT"
        fetched = await use_cases.get.execute(store_credit_id)
        assert fetched.value.amount_used == Decimal("50.00")


@pytest.mark.asyncio
class TestAllocation:

    async def test_user_total_amount_spans_store_credits(self, use_cases, seed):
        # Act
        await _create(use_cases, seed, "100.00")
        second = await _create(use_cases, seed, "200.00")
        other_user = await _create(use_cases, seed, "50.00", user_id=99)

        # Assert
        assert second.event.user_total_amount == Decimal("300.00")
        assert other_user.event.user_total_amount == Decimal("50.00")

    async def test_credit_type_follows_category(self, use_cases, seed):
        # Act
        exchange = await _create(use_cases, seed, "10.00", category="exchange")
        gift_card = await _create(use_cases, seed, "10.00", category="gift_card")

        # Assert
        assert exchange.store_credit.type_id == seed["expiring"]
        assert gift_card.store_credit.type_id == seed["non_expiring"]

    async def test_credit_to_new_allocation(self, use_cases, seed):
        """
        Given: 50.00 captured from a 100.00 store credit
        When: 20.00 is credited with credit_to_new_allocation
        Then: A new 20.00 store credit exists, opened by a credit event under the
              capture's code, and the original still has 50.00 used
        """
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "50.00")
        auth_code = authorized.value.event.authorization_code
        await use_cases.capture.execute(
            CaptureCommandDTO(
                store_credit_id=store_credit_id, amount=Decimal("50.00"), authorization_code=auth_code, currency="USD"
            )
        )

        # Act
        result = await use_cases.credit.execute(
            CreditCommandDTO(
                store_credit_id=store_credit_id,
                amount=Decimal("20.00"),
                authorization_code=auth_code,
                currency="USD",
                originator=OriginatorDTO(type="Refund", id="8"),
                credit_to_new_allocation=True,
            )
        )

        # Assert
        assert result.is_ok(), result
        new_store_credit = result.value.store_credit
        assert new_store_credit.id != store_credit_id
        assert new_store_credit.amount == Decimal("20.00")
        assert new_store_credit.user_id == 42
        assert new_store_credit.type_id == created.store_credit.type_id
        assert new_store_credit.memo == f"This is a credit from store credit ID {store_credit_id}"
        assert result.value.event.action == "credit"
        assert result.value.event.authorization_code == auth_code
        assert result.value.event.originator_type == "Refund"
        assert result.value.event.user_total_amount == Decimal("120.00")

        original = await use_cases.get.execute(store_credit_id)
        assert original.value.amount_used == Decimal("50.00")
        original_events = await use_cases.list_events.execute(store_credit_id)
        assert original_events.value.total == 3

    async def test_float_amount_is_authorizable(self, use_cases, seed):
        # Arrange
        created = await _create(use_cases, seed, "8.21")

        # Act
        result = await use_cases.validate_authorization.execute(created.store_credit.id, 8.21, "USD")

        # Assert
        assert result.is_ok()


@pytest.mark.asyncio
class TestDestroyAndLookups:

    async def test_destroy_unused_store_credit(self, use_cases, seed):
        # Arrange
        first = await _create(use_cases, seed, "100.00")
        await _create(use_cases, seed, "40.00")

        # Act
        result = await use_cases.destroy.execute(first.store_credit.id)

        # Assert
        assert result.is_ok()
        fetched = await use_cases.get.execute(first.store_credit.id)
        assert fetched.error.code == "STORE_CREDIT_NOT_FOUND"
        total = await use_cases.store_credit_repo.get_user_total_amount(42)
        assert total == Decimal("40.00")

    async def test_destroy_used_store_credit_fails(self, use_cases, seed):
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "10.00")
        await use_cases.capture.execute(
            CaptureCommandDTO(
                store_credit_id=store_credit_id,
                amount=Decimal("10.00"),
                authorization_code=authorized.value.event.authorization_code,
                currency="USD",
            )
        )

        # Act
        result = await use_cases.destroy.execute(store_credit_id)

        # Assert
        assert result.is_err()
        assert result.error.code == "AMOUNT_USED_NOT_ZERO"
        assert (await use_cases.get.execute(store_credit_id)).is_ok()

    async def test_event_order_and_payment_actions(self, use_cases, seed, db_session):
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "25.00")
        auth_code = authorized.value.event.authorization_code
        captured = await use_cases.capture.execute(
            CaptureCommandDTO(
                store_credit_id=store_credit_id, amount=Decimal("25.00"), authorization_code=auth_code, currency="USD"
            )
        )

        order = Order(number="R123456789", payment_state=OrderPaymentState.BALANCE_DUE.value)
        db_session.add(order)
        await db_session.commit()
        await db_session.refresh(order)
        payment = Payment(
            order_id=order.id,
            response_code=auth_code,
            state=PaymentState.PENDING.value,
            amount=Decimal("25.00"),
        )
        db_session.add(payment)
        await db_session.commit()

        # Act
        event_order = await use_cases.get_event_order.execute(captured.value.event.id)
        authorize_order = await use_cases.get_event_order.execute(authorized.value.event.id)
        actions = await use_cases.get_payment_actions.execute(store_credit_id, auth_code)

        # Assert
        assert event_order.is_ok()
        assert event_order.value.number == "R123456789"
        assert authorize_order.value is None
        assert actions.value.can_capture is True
        assert actions.value.can_void is True
        assert actions.value.can_credit is False

    async def test_reconcile_after_lifecycle(self, use_cases, seed):
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "60.00")
        auth_code = authorized.value.event.authorization_code
        await use_cases.capture.execute(
            CaptureCommandDTO(
                store_credit_id=store_credit_id, amount=Decimal("40.00"), authorization_code=auth_code, currency="USD"
            )
        )
        await use_cases.credit.execute(
            CreditCommandDTO(
                store_credit_id=store_credit_id, amount=Decimal("15.00"), authorization_code=auth_code, currency="USD"
            )
        )

        # Act
        result = await use_cases.reconcile.execute()

        # Assert
        assert result.is_ok()
        assert result.value.total_store_credits_checked == 1
        assert result.value.discrepancies_found == 0


@pytest.mark.asyncio
class TestCurrencyMismatch:

    async def test_mismatched_authorization_leaves_hold_in_place(self, use_cases, seed):
        """
        Given: 100.00 USD store credit with 40.00 USD authorized
        When: 30.00 EUR is authorized, then the 40.00 USD is captured
        Then: EUR is rejected with CURRENCY_MISMATCH and the capture uses the whole hold
        """
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "40.00")
        assert authorized.is_ok(), authorized

        # Act
        mismatched = await use_cases.authorize.execute(
            AuthorizeCommandDTO(store_credit_id=store_credit_id, amount=Decimal("30.00"), currency="EUR")
        )
        captured = await use_cases.capture.execute(
            CaptureCommandDTO(
                store_credit_id=store_credit_id,
                amount=Decimal("40.00"),
                authorization_code=authorized.value.event.authorization_code,
                currency="USD",
            )
        )

        # Assert
        assert mismatched.is_err()
        assert mismatched.error.code == "CURRENCY_MISMATCH"
        assert captured.is_ok(), captured
        assert captured.value.store_credit.amount_used == Decimal("40.00")
        assert captured.value.store_credit.amount_authorized == Decimal("0.00")


async def _capture(use_cases, store_credit_id: int, amount: str, auth_code: str):
    return await use_cases.capture.execute(
        CaptureCommandDTO(
            store_credit_id=store_credit_id, amount=Decimal(amount), authorization_code=auth_code, currency="USD"
        )
    )


def _credit(store_credit_id: int, amount: str, auth_code: str, to_new_allocation: bool) -> CreditCommandDTO:
    return CreditCommandDTO(
        store_credit_id=store_credit_id,
        amount=Decimal(amount),
        authorization_code=auth_code,
        currency="USD",
        credit_to_new_allocation=to_new_allocation,
    )


@pytest.mark.asyncio
class TestCaptureLimits:

    async def test_credit_to_new_allocation_is_capped_by_capture(self, use_cases, seed):
        """
        Given: 10.00 captured
        When: The capture is credited to a new allocation twice
        Then: Only the first credit issues store credit, the second is UNABLE_TO_CREDIT
        """
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "10.00")
        auth_code = authorized.value.event.authorization_code
        await _capture(use_cases, store_credit_id, "10.00", auth_code)

        # Act
        first = await use_cases.credit.execute(_credit(store_credit_id, "10.00", auth_code, True))
        second = await use_cases.credit.execute(_credit(store_credit_id, "10.00", auth_code, True))

        # Assert
        assert first.is_ok(), first
        assert second.is_err()
        assert second.error.code == "UNABLE_TO_CREDIT"
        total = await use_cases.store_credit_repo.get_user_total_amount(42)
        assert total == Decimal("110.00")

    async def test_credits_across_modes_share_the_capture_limit(self, use_cases, seed):
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "30.00")
        auth_code = authorized.value.event.authorization_code
        await _capture(use_cases, store_credit_id, "30.00", auth_code)

        # Act
        to_existing = await use_cases.credit.execute(_credit(store_credit_id, "20.00", auth_code, False))
        to_new = await use_cases.credit.execute(_credit(store_credit_id, "15.00", auth_code, True))
        remainder = await use_cases.credit.execute(_credit(store_credit_id, "10.00", auth_code, True))

        # Assert
        assert to_existing.is_ok(), to_existing
        assert to_new.is_err()
        assert to_new.error.code == "UNABLE_TO_CREDIT"
        assert remainder.is_ok(), remainder

    async def test_void_of_hold_captured_under_another_code_fails(self, use_cases, seed):
        """
        Given: 10.00 authorized under one code and captured under another
        When: The authorization is voided
        Then: UNABLE_TO_VOID and the balances are unchanged
        """
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "10.00")
        auth_code = authorized.value.event.authorization_code
        captured = await _capture(use_cases, store_credit_id, "10.00", "OTHER")
        assert captured.is_ok(), captured

        # Act
        result = await use_cases.void.execute(VoidCommandDTO(store_credit_id=store_credit_id, authorization_code=auth_code))

        # Assert
        assert result.is_err()
        assert result.error.code == "UNABLE_TO_VOID"
        fetched = await use_cases.get.execute(store_credit_id)
        assert fetched.value.amount_used == Decimal("10.00")
        assert fetched.value.amount_authorized == Decimal("0.00")

    async def test_reconcile_after_credit_to_new_allocation(self, use_cases, seed):
        # Arrange
        created = await _create(use_cases, seed, "100.00")
        store_credit_id = created.store_credit.id
        authorized = await _authorize(use_cases, store_credit_id, "40.00")
        auth_code = authorized.value.event.authorization_code
        await _capture(use_cases, store_credit_id, "40.00", auth_code)
        credited = await use_cases.credit.execute(_credit(store_credit_id, "25.00", auth_code, True))
        assert credited.is_ok(), credited

        # Act
        result = await use_cases.reconcile.execute()

        # Assert
        assert result.is_ok()
        assert result.value.total_store_credits_checked == 2
        assert result.value.discrepancies_found == 0


@pytest.mark.asyncio
class TestReconcilerWorker:

    async def test_run_once_against_database(self, use_cases, seed, db_uri, integration_config):
        # Arrange
        await _create(use_cases, seed, "100.00")
        worker = StoreCreditReconcilerWorker(db_uri=db_uri, config=integration_config)

        # Act
        try:
            result = await worker.run_once()
        finally:
            await worker.shutdown()

        # Assert
        assert result.total_store_credits_checked == 1
        assert result.discrepancies_found == 0
