"""Balance aggregation use cases"""
from .calculate import CalculateTotalExpenses, CalculateMealRate, CalculateUserMealCount, CalculateBalance
from .get_user_balance import GetUserBalance
from .get_group_balance_summary import GetGroupBalanceSummary
from .dtos import (
    BalanceQueryDTO,
    PeriodRefDTO,
    TotalExpensesDTO,
    MealRateDTO,
    UserMealCountDTO,
    BalanceDTO,
    UserBalanceDTO,
    GroupTotalsDTO,
    GroupBalanceSummaryDTO,
)

__all__ = [
    "CalculateTotalExpenses",
    "CalculateMealRate",
    "CalculateUserMealCount",
    "CalculateBalance",
    "GetUserBalance",
    "GetGroupBalanceSummary",
    "BalanceQueryDTO",
    "PeriodRefDTO",
    "TotalExpensesDTO",
    "MealRateDTO",
    "UserMealCountDTO",
    "BalanceDTO",
    "UserBalanceDTO",
    "GroupTotalsDTO",
    "GroupBalanceSummaryDTO",
]
