"""Get Store Credit Use Case

Retrieves a store credit with its remaining amount.
"""

from libs.result import Result, Return
from src.app.services.store_credit_errors import not_found_error
from src.app.repositories.store_credit_repository import StoreCreditRepository
from .dtos import StoreCreditResponseDTO


class GetStoreCredit:
    """Read-only lookup of a single store credit"""

    def __init__(self, store_credit_repo: StoreCreditRepository):
        self.store_credit_repo = store_credit_repo

    async def execute(self, store_credit_id: int) -> Result[StoreCreditResponseDTO]:
        store_credit = await self.store_credit_repo.get_by_id(store_credit_id)
        if not store_credit:
            return Return.err(not_found_error(store_credit_id))

        return Return.ok(StoreCreditResponseDTO.from_entity(store_credit))
