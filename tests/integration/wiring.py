"""Use cases wired to real repositories, the way the API routes build them"""

from src.adapter.repositories import (
    SqlAlchemyAccountTransactionRepository,
    SqlAlchemyExpenseRepository,
    SqlAlchemyGuestMealRepository,
    SqlAlchemyLedgerAggregateRepository,
    SqlAlchemyMealRepository,
    SqlAlchemyMembershipDirectory,
    SqlAlchemyPeriodRepository,
    SqlAlchemyRoomSettingsRepository,
    SqlAlchemyShoppingItemRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.balance_engine import BalanceEngine
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.use_cases.balances import GetGroupBalanceSummary, GetUserBalance
from src.app.use_cases.ledger import (
    CreateExpense,
    CreateTransaction,
    DeleteExpense,
    RecordShoppingPurchase,
    ToggleMeal,
    UpsertGuestMeal,
)
from src.app.use_cases.periods import (
    ArchivePeriod,
    EndPeriod,
    EnsureMonthPeriod,
    GetPeriodForDate,
    GetPeriodMode,
    ListPeriodsByMonth,
    LockPeriod,
    RestartPeriod,
    SetPeriodMode,
    StartPeriod,
    UnlockPeriod,
)


class Services:

    def __init__(self, session, session_factory, cache):
        self.session = session
        self.cache = cache
        self.uow = SqlAlchemyUnitOfWork(session)
        self.periods = SqlAlchemyPeriodRepository(session)
        self.settings = SqlAlchemyRoomSettingsRepository(session)
        self.transactions = SqlAlchemyAccountTransactionRepository(session)
        self.gate = PermissionGate(SqlAlchemyMembershipDirectory(session_factory))
        self.engine = BalanceEngine(SqlAlchemyLedgerAggregateRepository(session_factory), self.gate.directory)
        self.guard = PeriodGuard(self.periods)

    def period_command(self, use_case_class):
        return use_case_class(self.uow, self.periods, self.gate, self.cache)

    @property
    def start_period(self) -> StartPeriod:
        return self.period_command(StartPeriod)

    @property
    def end_period(self) -> EndPeriod:
        return EndPeriod(self.uow, self.periods, self.gate, self.cache, settings_repo=self.settings)

    @property
    def lock_period(self) -> LockPeriod:
        return self.period_command(LockPeriod)

    @property
    def unlock_period(self) -> UnlockPeriod:
        return self.period_command(UnlockPeriod)

    @property
    def archive_period(self) -> ArchivePeriod:
        return self.period_command(ArchivePeriod)

    @property
    def restart_period(self) -> RestartPeriod:
        return RestartPeriod(self.uow, self.periods, self.transactions, self.engine, self.gate, self.cache)

    @property
    def toggle_meal(self) -> ToggleMeal:
        return ToggleMeal(self.uow, SqlAlchemyMealRepository(self.session), self.guard, self.gate, self.cache)

    @property
    def upsert_guest_meal(self) -> UpsertGuestMeal:
        return UpsertGuestMeal(self.uow, SqlAlchemyGuestMealRepository(self.session), self.guard, self.gate, self.cache)

    @property
    def create_expense(self) -> CreateExpense:
        return CreateExpense(
            self.uow, SqlAlchemyExpenseRepository(self.session), self.transactions, self.guard, self.gate, self.cache
        )

    @property
    def delete_expense(self) -> DeleteExpense:
        return DeleteExpense(
            self.uow, SqlAlchemyExpenseRepository(self.session), self.transactions, self.guard, self.gate, self.cache
        )

    @property
    def record_purchase(self) -> RecordShoppingPurchase:
        return RecordShoppingPurchase(
            self.uow, SqlAlchemyShoppingItemRepository(self.session), self.guard, self.gate, self.cache
        )

    @property
    def create_transaction(self) -> CreateTransaction:
        return CreateTransaction(self.uow, self.transactions, self.guard, self.gate, self.cache)

    @property
    def user_balance(self) -> GetUserBalance:
        return GetUserBalance(self.guard, self.engine, self.gate, self.cache)

    @property
    def group_summary(self) -> GetGroupBalanceSummary:
        return GetGroupBalanceSummary(self.guard, self.engine, self.gate, self.cache)

    @property
    def period_for_date(self) -> GetPeriodForDate:
        return GetPeriodForDate(self.periods, self.cache, gate=self.gate)

    @property
    def periods_by_month(self) -> ListPeriodsByMonth:
        return ListPeriodsByMonth(self.periods, self.gate)

    @property
    def get_period_mode(self) -> GetPeriodMode:
        return GetPeriodMode(self.settings, self.gate)

    @property
    def set_period_mode(self) -> SetPeriodMode:
        return SetPeriodMode(
            self.uow,
            self.settings,
            self.periods,
            self.gate,
            self.cache,
            provisioner=self.period_command(EnsureMonthPeriod),
        )
