"""
List Store Credit Events Use Case

Retrieves the audit trail of a store credit with pagination.
"""
from libs.result import Result, Return
from src.app.repositories.store_credit_event_repository import StoreCreditEventRepository
from .dtos import ListStoreCreditEventsResponseDTO, StoreCreditEventDTO


class ListStoreCreditEvents:
    """
    Use case: View store credit history

    Events are ordered by created_at DESC (most recent first).
    """

    def __init__(self, event_repo: StoreCreditEventRepository):
        self.event_repo = event_repo

    async def execute(
        self, store_credit_id: int, limit: int = 20, offset: int = 0
    ) -> Result[ListStoreCreditEventsResponseDTO]:
        events, total = await self.event_repo.get_by_store_credit_id(
            store_credit_id=store_credit_id,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListStoreCreditEventsResponseDTO(
                events=[StoreCreditEventDTO.from_entity(event) for event in events],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
