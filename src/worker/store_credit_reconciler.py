"""Store credit reconciliation worker

Replays every live store credit's events on a schedule and reports the
ledgers whose amount_used / amount_authorized disagree with them. The
replay itself is ReconcileStoreCredits, which also logs each discrepancy.

    python -m src.worker.store_credit_reconciler --once
    python -m src.worker.store_credit_reconciler --interval 3600
"""

import argparse
import asyncio
import logging
from typing import Optional

from config import ApplicationConfig
from src.app.use_cases.store_credit import ReconciliationResultDTO
from src.depends import StoreCreditUseCases, create_session_factory

logger = logging.getLogger(__name__)


class StoreCreditReconcilerWorker:
    """
    Runs store credit reconciliation once or until stopped

    Each run opens its own session. RECONCILIATION_ENABLED=False turns runs
    into no-ops without stopping the schedule.
    """

    def __init__(self, db_uri: Optional[str] = None, config=ApplicationConfig):
        self.config = config
        self.engine, self.session_factory = create_session_factory(db_uri or config.DB_URI)
        self._stopped = asyncio.Event()

    async def run_once(self) -> Optional[ReconciliationResultDTO]:
        """
        Returns:
            The reconciliation result, None when reconciliation is disabled

        Raises:
            RuntimeError: If the reconciliation itself failed
        """
        if not self.config.RECONCILIATION_ENABLED:
            logger.info("Store credit reconciliation is disabled, skipping run")
            return None

        async with self.session_factory() as session:
            result = await StoreCreditUseCases(session, config=self.config).reconcile.execute()

        if result.is_err():
            raise RuntimeError(f"{result.error.code}: {result.error.reason or result.error.message}")

        response = result.value
        if response.discrepancies_found:
            logger.error(
                f"{response.discrepancies_found} of {response.total_store_credits_checked} "
                f"store credits are out of balance with their events"
            )
        return response

    async def run_forever(self, interval_seconds: Optional[int] = None):
        """Run until stop() or shutdown(); a failed run is logged and retried next interval"""
        interval = interval_seconds or self.config.RECONCILIATION_INTERVAL_SECONDS
        logger.info(f"Store credit reconciliation scheduled every {interval}s")

        while not self._stopped.is_set():
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Store credit reconciliation run failed: {e}")

            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass

    def stop(self):
        self._stopped.set()

    async def shutdown(self):
        self.stop()
        await self.engine.dispose()


async def main(argv=None):
    parser = argparse.ArgumentParser(description="Reconcile store credit balances against their events")
    parser.add_argument("--once", action="store_true", help="Run a single reconciliation and exit")
    parser.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Seconds between runs",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    worker = StoreCreditReconcilerWorker()
    try:
        if args.once:
            result = await worker.run_once()
            if result:
                logger.info(
                    f"Checked {result.total_store_credits_checked} store credits, "
                    f"{result.discrepancies_found} discrepancies, {result.execution_time_ms}ms"
                )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
