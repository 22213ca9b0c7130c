"""RecordShoppingPurchase Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.shopping_item_repository import ShoppingItemRepository
from src.app.services.cache_service import CacheService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import LedgerError
from src.domain.shopping_item import ShoppingItem
from .base import LedgerCommand
from .dtos import RecordShoppingPurchaseCommandDTO, ShoppingItemDTO

logger = logging.getLogger(__name__)


class RecordShoppingPurchase(LedgerCommand):
    """
    Use Case: Record a purchased shopping item

    Purchased items count toward the period's total expense.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        shopping_repo: ShoppingItemRepository,
        guard: PeriodGuard,
        gate: PermissionGate,
        cache: CacheService,
    ):
        super().__init__(uow, guard, gate, cache)
        self.shopping_repo = shopping_repo

    async def execute(self, command: RecordShoppingPurchaseCommandDTO) -> Result[ShoppingItemDTO]:
        buyer_id = command.target_user_id
        try:
            await self.gate.require_can_act_for(command.actor_id, buyer_id, command.room_id, "record purchases")

            period = await self.guard.writable_period(command.room_id, command.period_id, command.purchase_date)

            item = await self.shopping_repo.create(
                ShoppingItem(
                    room_id=command.room_id,
                    period_id=period.id,
                    user_id=buyer_id,
                    name=command.name,
                    amount=command.amount,
                    purchased=True,
                    purchase_date=command.purchase_date,
                )
            )

            await self._commit(period.id)
            return Return.ok(ShoppingItemDTO.from_entity(item))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to record purchase in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="RECORD_SHOPPING_PURCHASE_FAILED", message="Failed to record purchase", reason=str(e)))
