"""
Unit tests for PermissionGate
"""

import pytest
from src.app.services.permission_gate import PermissionGate, PrivilegeTier
from src.domain.errors import AuthorizationError
from tests.factories import ROOM_ID


class TestTierForRole:

    @pytest.mark.parametrize("role", ["ADMIN", "admin", "Manager", "MODERATOR", "accountant"])
    def test_privileged_roles_case_insensitive(self, gate, role):
        assert gate.tier_for_role(role) == PrivilegeTier.PRIVILEGED

    @pytest.mark.parametrize("role", ["MEMBER", "guest", "cook"])
    def test_other_roles_are_members(self, gate, role):
        assert gate.tier_for_role(role) == PrivilegeTier.MEMBER

    @pytest.mark.parametrize("role", [None, ""])
    def test_missing_role_has_no_tier(self, gate, role):
        assert gate.tier_for_role(role) is None

    def test_custom_allow_list(self, mock_directory):
        gate = PermissionGate(mock_directory, privileged_roles=["treasurer"])

        assert gate.tier_for_role("TREASURER") == PrivilegeTier.PRIVILEGED
        assert gate.tier_for_role("ADMIN") == PrivilegeTier.MEMBER


@pytest.mark.asyncio
class TestRequirements:

    async def test_require_member_rejects_outsider(self, gate):
        with pytest.raises(AuthorizationError):
            await gate.require_member("stranger", ROOM_ID, "view balances")

    async def test_require_member_rejects_other_room(self, gate):
        with pytest.raises(AuthorizationError):
            await gate.require_member("admin_1", "other_room", "view balances")

    async def test_require_privileged_allows_manager(self, gate):
        await gate.require_privileged("manager_1", ROOM_ID, "lock periods")

    async def test_require_privileged_rejects_member(self, gate):
        with pytest.raises(AuthorizationError) as exc:
            await gate.require_privileged("member_1", ROOM_ID, "lock periods")

        assert exc.value.code == "AUTHORIZATION_ERROR"

    async def test_member_can_act_for_self(self, gate):
        tier = await gate.require_can_act_for("member_1", "member_1", ROOM_ID, "view balance")

        assert tier == PrivilegeTier.MEMBER

    async def test_member_cannot_act_for_others(self, gate):
        with pytest.raises(AuthorizationError):
            await gate.require_can_act_for("member_1", "member_2", ROOM_ID, "view balance")

    async def test_privileged_can_act_for_others(self, gate):
        tier = await gate.require_can_act_for("admin_1", "member_2", ROOM_ID, "view balance")

        assert tier == PrivilegeTier.PRIVILEGED
