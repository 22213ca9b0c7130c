"""CreateTransaction Use Case

Records a signed money movement against one member's balance.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.account_transaction_repository import AccountTransactionRepository
from src.app.services.cache_service import CacheService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate, PrivilegeTier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account_transaction import AccountTransaction, TransactionType
from src.domain.errors import AuthorizationError, LedgerError, ValidationError
from .base import LedgerCommand
from .dtos import CreateTransactionCommandDTO, TransactionDTO

logger = logging.getLogger(__name__)


class CreateTransaction(LedgerCommand):
    """
    Use Case: Create an account transaction

    Business Rules:
    1. Privileged tiers record any type for any member
    2. Members may only record PAYMENTs, and only to a privileged member
    3. EXPENSE transactions are created by CreateExpense, never directly
    """

    def __init__(
        self,
        uow: UnitOfWork,
        transaction_repo: AccountTransactionRepository,
        guard: PeriodGuard,
        gate: PermissionGate,
        cache: CacheService,
    ):
        super().__init__(uow, guard, gate, cache)
        self.transaction_repo = transaction_repo

    async def execute(self, command: CreateTransactionCommandDTO) -> Result[TransactionDTO]:
        try:
            tier = await self.gate.require_member(command.actor_id, command.room_id, "record transactions")

            if command.transaction_type == TransactionType.EXPENSE:
                raise ValidationError("Expense transactions are recorded by creating an expense")

            if tier != PrivilegeTier.PRIVILEGED:
                if command.transaction_type != TransactionType.PAYMENT:
                    raise AuthorizationError("Members can only create payment transactions")
                target_tier = await self.gate.resolve_tier(command.target_user_id, command.room_id)
                if target_tier != PrivilegeTier.PRIVILEGED:
                    raise AuthorizationError("Payments can only be made to privileged members")

            period = await self.guard.writable_period(command.room_id, command.period_id)

            transaction = await self.transaction_repo.create(
                AccountTransaction(
                    room_id=command.room_id,
                    period_id=period.id,
                    user_id=command.actor_id,
                    target_user_id=command.target_user_id,
                    amount=command.amount,
                    transaction_type=command.transaction_type,
                    description=command.description,
                )
            )

            await self._commit(period.id)
            return Return.ok(TransactionDTO.from_entity(transaction))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to create transaction in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="CREATE_TRANSACTION_FAILED", message="Failed to create transaction", reason=str(e)))
