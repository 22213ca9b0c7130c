"""Permission Gate

Turns free-form role strings into a privilege tier once, at this boundary,
so every operation checks the same allow-list.
"""

import logging
from enum import Enum
from typing import Iterable, Optional
from src.app.services.membership_directory import MembershipDirectory
from src.domain.errors import AuthorizationError

logger = logging.getLogger(__name__)

DEFAULT_PRIVILEGED_ROLES = ("ADMIN", "MANAGER", "MODERATOR", "ACCOUNTANT")


class PrivilegeTier(str, Enum):
    MEMBER = "member"
    PRIVILEGED = "privileged"


class PermissionGate:
    """
    Privilege checks for ledger operations

    - Period transitions and cross-user writes need PRIVILEGED
    - A member may always read and write their own records
    - Non-members are rejected with AuthorizationError
    """

    def __init__(self, directory: MembershipDirectory, privileged_roles: Iterable[str] = DEFAULT_PRIVILEGED_ROLES):
        self.directory = directory
        self.privileged_roles = frozenset(role.upper() for role in privileged_roles)

    def tier_for_role(self, role: Optional[str]) -> Optional[PrivilegeTier]:
        if not role:
            return None
        if role.upper() in self.privileged_roles:
            return PrivilegeTier.PRIVILEGED
        return PrivilegeTier.MEMBER

    async def resolve_tier(self, user_id: str, room_id: str) -> Optional[PrivilegeTier]:
        role = await self.directory.resolve_role(user_id, room_id)
        return self.tier_for_role(role)

    async def require_member(self, user_id: str, room_id: str, action: str) -> PrivilegeTier:
        tier = await self.resolve_tier(user_id, room_id)
        if tier is None:
            logger.info(f"Rejected {action}: user {user_id} is not a member of room {room_id}")
            raise AuthorizationError(f"You are not a member of this room and cannot {action}")
        return tier

    async def require_privileged(self, user_id: str, room_id: str, action: str) -> None:
        tier = await self.require_member(user_id, room_id, action)
        if tier != PrivilegeTier.PRIVILEGED:
            logger.info(f"Rejected {action}: user {user_id} lacks privileged role in room {room_id}")
            raise AuthorizationError(f"Insufficient permissions to {action}")

    async def require_can_act_for(self, actor_id: str, user_id: str, room_id: str, action: str) -> PrivilegeTier:
        """Allow acting on one's own records, or on anyone's with PRIVILEGED"""
        tier = await self.require_member(actor_id, room_id, action)
        if actor_id != user_id and tier != PrivilegeTier.PRIVILEGED:
            raise AuthorizationError(f"Insufficient permissions to {action} for another member")
        return tier
