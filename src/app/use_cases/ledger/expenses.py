"""CreateExpense and DeleteExpense Use Cases

An expense and its mirroring EXPENSE transaction are written and removed
together in one unit of work.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.account_transaction_repository import AccountTransactionRepository
from src.app.repositories.expense_repository import ExpenseRepository
from src.app.services.cache_service import CacheService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account_transaction import AccountTransaction, TransactionType
from src.domain.errors import LedgerError, NotFoundError
from src.domain.expense import Expense
from .base import LedgerCommand
from .dtos import CreateExpenseCommandDTO, DeleteExpenseCommandDTO, ExpenseDTO

logger = logging.getLogger(__name__)


class ExpenseCommand(LedgerCommand):

    def __init__(
        self,
        uow: UnitOfWork,
        expense_repo: ExpenseRepository,
        transaction_repo: AccountTransactionRepository,
        guard: PeriodGuard,
        gate: PermissionGate,
        cache: CacheService,
    ):
        super().__init__(uow, guard, gate, cache)
        self.expense_repo = expense_repo
        self.transaction_repo = transaction_repo


class CreateExpense(ExpenseCommand):
    """
    Use Case: Record an expense

    Business Rules:
    1. Members record their own expenses, privileged tiers anyone's
    2. The payer's balance is debited by an EXPENSE transaction of -amount
    3. The expense counts toward the period's total expense (meal rate)

    Flow:
    1. Check permission
    2. Resolve a writable period (explicit, by expense date, or current)
    3. Create expense and its transaction
    4. Commit and invalidate the period's aggregations
    """

    async def execute(self, command: CreateExpenseCommandDTO) -> Result[ExpenseDTO]:
        payer_id = command.target_user_id
        try:
            await self.gate.require_can_act_for(command.actor_id, payer_id, command.room_id, "record expenses")

            period = await self.guard.writable_period(command.room_id, command.period_id, command.expense_date)

            expense = await self.expense_repo.create(
                Expense(
                    room_id=command.room_id,
                    period_id=period.id,
                    user_id=payer_id,
                    description=command.description,
                    amount=command.amount,
                    expense_date=command.expense_date,
                    expense_type=command.expense_type,
                    receipt_url=command.receipt_url,
                )
            )

            await self.transaction_repo.create(
                AccountTransaction(
                    room_id=command.room_id,
                    period_id=period.id,
                    user_id=payer_id,
                    target_user_id=payer_id,
                    amount=-command.amount,
                    transaction_type=TransactionType.EXPENSE,
                    description=f"Expense: {command.description}"[:255],
                    expense_id=expense.id,
                )
            )

            await self._commit(period.id)
            return Return.ok(ExpenseDTO.from_entity(expense))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to create expense in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="CREATE_EXPENSE_FAILED", message="Failed to create expense", reason=str(e)))


class DeleteExpense(ExpenseCommand):
    """
    Use Case: Delete an expense and its EXPENSE transaction

    The payer or a privileged tier may delete; the expense's own period must
    still accept writes.
    """

    async def execute(self, command: DeleteExpenseCommandDTO) -> Result[ExpenseDTO]:
        try:
            expense = await self.expense_repo.get_by_id(command.expense_id)
            if expense is None or expense.room_id != command.room_id:
                raise NotFoundError(f"Expense {command.expense_id} not found")

            await self.gate.require_can_act_for(command.actor_id, expense.user_id, command.room_id, "delete expenses")
            await self.guard.writable_period(command.room_id, expense.period_id)

            deleted = ExpenseDTO.from_entity(expense)
            await self.transaction_repo.delete_for_expense(expense.id)
            await self.expense_repo.delete(expense)

            await self._commit(deleted.period_id)
            return Return.ok(deleted)

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to delete expense {command.expense_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="DELETE_EXPENSE_FAILED", message="Failed to delete expense", reason=str(e)))
