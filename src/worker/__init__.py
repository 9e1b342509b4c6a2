"""Background workers for store credit service"""
from .store_credit_reconciler import StoreCreditReconcilerWorker

__all__ = ["StoreCreditReconcilerWorker"]
