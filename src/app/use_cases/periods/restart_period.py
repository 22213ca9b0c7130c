"""RestartPeriod Use Case

Opens a fresh ACTIVE period after an existing one, optionally carrying
members' unresolved balances forward. The source period is left untouched.
"""

import logging
from datetime import date
from typing import Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.repositories.account_transaction_repository import AccountTransactionRepository
from src.app.repositories.period_repository import PeriodRepository
from src.app.services.balance_engine import BalanceEngine
from src.app.services.cache_service import CacheService
from src.app.services.notification_service import NotificationKind, NotificationService
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account_transaction import AccountTransaction, TransactionType
from src.domain.balance import ZERO
from src.domain.errors import LedgerError, ValidationError
from src.domain.period import Period, PeriodStatus
from .base import PeriodCommand, unique_period_name
from .dtos import PeriodDTO, RestartPeriodCommandDTO

logger = logging.getLogger(__name__)


class RestartPeriod(PeriodCommand):
    """
    Use Case: Restart a period

    Business Rules:
    1. Privileged tier only
    2. Refused while any period of the room is ACTIVE
    3. New period starts today, named new_name or "<source> (Restarted)"
    4. with_data: each member's non-zero available balance in the source
       period becomes one ADJUSTMENT transaction in the new period. Raw meal
       history is never copied.

    Flow:
    1. Check permission and load source
    2. Compute carry-forward figures (before any write in this session)
    3. Create period and adjustments
    4. Commit, invalidate room cache, notify members
    """

    def __init__(
        self,
        uow: UnitOfWork,
        period_repo: PeriodRepository,
        transaction_repo: AccountTransactionRepository,
        engine: BalanceEngine,
        gate: PermissionGate,
        cache: CacheService,
        notifier: Optional[NotificationService] = None,
    ):
        super().__init__(uow, period_repo, gate, cache, notifier)
        self.transaction_repo = transaction_repo
        self.engine = engine

    async def execute(self, command: RestartPeriodCommandDTO) -> Result[PeriodDTO]:
        try:
            await self.gate.require_privileged(command.actor_id, command.room_id, "restart a period")

            source = await self._load(command.room_id, command.period_id)

            active = await self.period_repo.get_active(command.room_id)
            if active is not None:
                raise ValidationError(
                    f"Room already has an active period '{active.name}'. End it before restarting",
                    reason=f"active_period_id={active.id}",
                )

            carried = []
            if command.with_data:
                summary = await self.engine.summarize_group(command.room_id, source.id)
                carried = [m for m in summary.members if m.available_balance != ZERO]

            name = await unique_period_name(
                self.period_repo, command.room_id, command.new_name or f"{source.name} (Restarted)"
            )

            try:
                period = await self.period_repo.create(
                    Period(
                        room_id=command.room_id,
                        name=name,
                        start_date=date.today(),
                        status=PeriodStatus.ACTIVE,
                        created_by=command.actor_id,
                        notes=f"Restarted from '{source.name}'",
                    )
                )
            except IntegrityError:
                await self.uow.rollback()
                raise ValidationError("Room already has an active period", reason="concurrent start")

            for figures in carried:
                await self.transaction_repo.create(
                    AccountTransaction(
                        room_id=command.room_id,
                        period_id=period.id,
                        user_id=command.actor_id,
                        target_user_id=figures.user_id,
                        amount=figures.available_balance,
                        transaction_type=TransactionType.ADJUSTMENT,
                        description=f"Balance carried forward from '{source.name}'",
                    )
                )

            await self.uow.commit()
            await self._announce(
                command.room_id,
                NotificationKind.PERIOD_RESTARTED,
                f"Period '{period.name}' started from '{source.name}'"
                + (f" with {len(carried)} carried balances" if command.with_data else ""),
            )

            return Return.ok(PeriodDTO.from_entity(period))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to restart period in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="RESTART_PERIOD_FAILED", message="Failed to restart period", reason=str(e)))
