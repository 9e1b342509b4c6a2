from .unit_of_work import UnitOfWork
from .store_credit_allocator import StoreCreditAllocator
from .ledger_writes import record_event, update_balances
from .store_credit_errors import ledger_error, not_found_error

__all__ = [
    "UnitOfWork",
    "StoreCreditAllocator",
    "record_event",
    "update_balances",
    "ledger_error",
    "not_found_error",
]
