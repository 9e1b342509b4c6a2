"""ReconcileStoreCredits Use Case

Reconciles store credit balances against their event history to detect
discrepancies.
"""

import logging
import time
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.repositories.store_credit_repository import StoreCreditRepository
from src.app.repositories.store_credit_event_repository import StoreCreditEventRepository
from src.domain.store_credit import to_decimal
from src.domain.store_credit_event import StoreCreditAction
from .dtos import StoreCreditDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileStoreCredits:
    """
    Use Case: Reconcile store credits against events

    Business Rules:
    1. Replays each live store credit's events:
       - authorized = authorize - capture - void
       - used = capture - credit
       The event that issued the store credit (allocation, or credit when
       it was credited to a new allocation) is left out
    2. Compares the replayed amounts with the stored ones
    3. Records and logs any discrepancies found
    4. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        store_credit_repo: StoreCreditRepository,
        event_repo: StoreCreditEventRepository,
    ):
        self.store_credit_repo = store_credit_repo
        self.event_repo = event_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute store credit reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting store credit reconciliation")

            # Step 1: Get all live store credits
            store_credits = await self.store_credit_repo.get_all()
            total = len(store_credits)

            logger.info(f"Found {total} store credits to reconcile")

            # Step 2: Replay events of each store credit
            discrepancies: list[StoreCreditDiscrepancyDTO] = []

            for store_credit in store_credits:
                sums = await self.event_repo.get_action_sums(store_credit.id)

                # The event that issued the store credit never moves its balances
                creation_event = await self.event_repo.get_creation_event(store_credit.id)
                if creation_event:
                    sums[StoreCreditAction(creation_event.action)] -= to_decimal(creation_event.amount)

                expected_authorized = (
                    sums[StoreCreditAction.AUTHORIZE]
                    - sums[StoreCreditAction.CAPTURE]
                    - sums[StoreCreditAction.VOID]
                )
                expected_used = sums[StoreCreditAction.CAPTURE] - sums[StoreCreditAction.CREDIT]

                amount_used = to_decimal(store_credit.amount_used)
                amount_authorized = to_decimal(store_credit.amount_authorized)

                if amount_used != expected_used or amount_authorized != expected_authorized:
                    discrepancies.append(
                        StoreCreditDiscrepancyDTO(
                            store_credit_id=store_credit.id,
                            user_id=store_credit.user_id,
                            amount_used=amount_used,
                            expected_amount_used=expected_used,
                            amount_authorized=amount_authorized,
                            expected_amount_authorized=expected_authorized,
                        )
                    )

                    logger.warning(
                        f"Discrepancy found for store credit {store_credit.id} "
                        f"(user_id={store_credit.user_id}): "
                        f"amount_used={amount_used} expected={expected_used}, "
                        f"amount_authorized={amount_authorized} expected={expected_authorized}"
                    )

            # Step 3: Build response
            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_store_credits_checked=total,
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total} store credits in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total} store credits balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Store credit reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile store credits",
                    reason=str(e),
                )
            )
