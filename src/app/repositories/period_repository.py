"""Period Repository Interface

Defines the contract for period persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from src.domain.period import Period, PeriodStatus


class PeriodRepository(ABC):
    """
    Repository interface for Period persistence

    Lookups are always scoped to a room.
    """

    @abstractmethod
    async def create(self, period: Period) -> Period:
        """
        Create a new period

        Args:
            period: Period entity to persist

        Returns:
            Created Period

        Raises:
            IntegrityError: room already has an ACTIVE period
        """
        pass

    @abstractmethod
    async def save(self, period: Period) -> Period:
        """
        Persist changes to status, lock flag or dates

        Args:
            period: Period entity with updated values

        Returns:
            Updated Period
        """
        pass

    @abstractmethod
    async def get_by_id(self, period_id: str) -> Optional[Period]:
        pass

    @abstractmethod
    async def get_active(self, room_id: str) -> Optional[Period]:
        """
        Retrieve the room's ACTIVE period

        Returns:
            Period if the room has one, None otherwise
        """
        pass

    @abstractmethod
    async def get_for_date(self, room_id: str, day: date) -> Optional[Period]:
        """
        Retrieve the period whose [start_date, end_date] contains ``day``

        An open ended period contains every day from its start. When several
        periods match, the most recently created one wins.
        """
        pass

    @abstractmethod
    async def find_by_name(self, room_id: str, name: str) -> Optional[Period]:
        pass

    @abstractmethod
    async def names_like(self, room_id: str, prefix: str) -> List[str]:
        """Names in the room starting with ``prefix``, used to build unique names"""
        pass

    @abstractmethod
    async def find_overlapping(
        self,
        room_id: str,
        start_date: date,
        end_date: Optional[date],
        exclude_id: Optional[str] = None,
    ) -> List[Period]:
        """
        Periods in the room whose date range intersects [start_date, end_date]

        Open ended ranges (end_date None) extend indefinitely.
        """
        pass

    @abstractmethod
    async def list_by_room(
        self,
        room_id: str,
        status: Optional[PeriodStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Period]:
        """
        List periods of a room, newest start date first

        Args:
            room_id: Room identifier
            status: Optional filter by status
            limit: Maximum number of periods to return
            offset: Offset for pagination
        """
        pass
