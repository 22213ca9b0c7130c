"""Integration tests for the HTTP API"""

import pytest
from datetime import date
from httpx import AsyncClient

from src.app.use_cases.periods.ensure_month_period import month_name
from tests.factories import ROOM_ID

ADMIN = {"X-User-Id": "admin_1"}
MEMBER = {"X-User-Id": "member_1"}
OTHER_MEMBER = {"X-User-Id": "member_2"}


async def start_october(client: AsyncClient):
    response = await client.post(
        f"/api/periods/{ROOM_ID}/start",
        json={"name": "October 2026", "start_date": "2026-10-01"},
        headers=ADMIN,
    )
    assert response.status_code == 201
    return response.json()


class TestPeriodsAPIIntegration:

    @pytest.mark.asyncio
    async def test_start_and_read_current_period(self, client: AsyncClient):
        started = await start_october(client)

        response = await client.get(f"/api/periods/{ROOM_ID}/current", headers=MEMBER)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == started["id"]
        assert data["status"] == "ACTIVE"
        assert data["state"] == "ACTIVE"

    @pytest.mark.asyncio
    async def test_current_period_is_null_without_periods(self, client: AsyncClient):
        response = await client.get(f"/api/periods/{ROOM_ID}/current", headers=MEMBER)

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_member_cannot_start_period(self, client: AsyncClient):
        response = await client.post(
            f"/api/periods/{ROOM_ID}/start",
            json={"name": "Mine", "start_date": "2026-10-01"},
            headers=MEMBER,
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTHORIZATION_ERROR"

    @pytest.mark.asyncio
    async def test_lock_active_period_conflicts(self, client: AsyncClient):
        await start_october(client)

        response = await client.post(f"/api/periods/{ROOM_ID}/lock", json={}, headers=ADMIN)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATE"

    @pytest.mark.asyncio
    async def test_start_with_inverted_dates_rejected(self, client: AsyncClient):
        response = await client.post(
            f"/api/periods/{ROOM_ID}/start",
            json={"name": "Backwards", "start_date": "2026-10-31", "end_date": "2026-10-01"},
            headers=ADMIN,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_missing_user_header_rejected(self, client: AsyncClient):
        response = await client.get(f"/api/periods/{ROOM_ID}/current")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_and_summary(self, client: AsyncClient):
        started = await start_october(client)
        await client.post(
            f"/api/ledger/{ROOM_ID}/meals",
            json={"meal_date": "2026-10-02", "meal_type": "LUNCH"},
            headers=MEMBER,
        )

        listing = await client.get(f"/api/periods/{ROOM_ID}", headers=MEMBER)
        summary = await client.get(f"/api/periods/{ROOM_ID}/summary", headers=MEMBER)

        assert listing.json()["total"] == 1
        assert summary.status_code == 200
        assert summary.json()["period"]["id"] == started["id"]
        assert summary.json()["total_meals"] == 1
        assert summary.json()["member_count"] == 4

    @pytest.mark.asyncio
    async def test_periods_by_month_and_date(self, client: AsyncClient):
        started = await start_october(client)

        october = await client.get(f"/api/periods/{ROOM_ID}/by-month", params={"year": 2026, "month": 10}, headers=MEMBER)
        september = await client.get(f"/api/periods/{ROOM_ID}/by-month", params={"year": 2026, "month": 9}, headers=MEMBER)
        on_date = await client.get(f"/api/periods/{ROOM_ID}/by-date", params={"on": "2026-10-20"}, headers=MEMBER)

        assert [p["id"] for p in october.json()["periods"]] == [started["id"]]
        assert september.json()["total"] == 0
        assert on_date.json()["id"] == started["id"]

    @pytest.mark.asyncio
    async def test_periods_by_month_rejects_month_out_of_range(self, client: AsyncClient):
        response = await client.get(f"/api/periods/{ROOM_ID}/by-month", params={"year": 2026, "month": 0}, headers=MEMBER)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_period_mode_switch(self, client: AsyncClient):
        default = await client.get(f"/api/periods/{ROOM_ID}/mode", headers=MEMBER)
        assert default.json()["period_mode"] == "CUSTOM"
        assert default.json()["is_default"] is True

        switched = await client.put(f"/api/periods/{ROOM_ID}/mode", json={"mode": "MONTHLY"}, headers=ADMIN)
        assert switched.status_code == 200
        assert switched.json()["period_mode"] == "MONTHLY"

        current = await client.get(f"/api/periods/{ROOM_ID}/current", headers=MEMBER)
        assert current.json()["name"] == month_name(date.today())

        blocked = await client.put(f"/api/periods/{ROOM_ID}/mode", json={"mode": "CUSTOM"}, headers=ADMIN)
        assert blocked.status_code == 400
        assert blocked.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_member_cannot_switch_period_mode(self, client: AsyncClient):
        response = await client.put(f"/api/periods/{ROOM_ID}/mode", json={"mode": "MONTHLY"}, headers=MEMBER)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTHORIZATION_ERROR"


class TestLedgerAPIIntegration:

    @pytest.mark.asyncio
    async def test_toggle_meal_twice(self, client: AsyncClient):
        await start_october(client)
        payload = {"meal_date": "2026-10-02", "meal_type": "DINNER"}

        first = await client.post(f"/api/ledger/{ROOM_ID}/meals", json=payload, headers=MEMBER)
        second = await client.post(f"/api/ledger/{ROOM_ID}/meals", json=payload, headers=MEMBER)

        assert first.status_code == 200
        assert first.json()["changed"] is True
        assert second.json()["changed"] is False
        assert second.json()["present"] is True

    @pytest.mark.asyncio
    async def test_meal_for_other_member_forbidden(self, client: AsyncClient):
        await start_october(client)

        response = await client.post(
            f"/api/ledger/{ROOM_ID}/meals",
            json={"meal_date": "2026-10-02", "meal_type": "DINNER", "user_id": "member_2"},
            headers=MEMBER,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_write_into_locked_period(self, client: AsyncClient):
        started = await start_october(client)
        await client.post(f"/api/periods/{ROOM_ID}/end", json={"end_date": "2026-10-31"}, headers=ADMIN)
        await client.post(f"/api/periods/{ROOM_ID}/lock", json={"period_id": started["id"]}, headers=ADMIN)

        response = await client.post(
            f"/api/ledger/{ROOM_ID}/expenses",
            json={"description": "Late", "amount": "10", "expense_date": "2026-10-15"},
            headers=MEMBER,
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATE"

    @pytest.mark.asyncio
    async def test_zero_amount_transaction_rejected(self, client: AsyncClient):
        await start_october(client)

        response = await client.post(
            f"/api/ledger/{ROOM_ID}/transactions",
            json={"target_user_id": "admin_1", "amount": "0"},
            headers=MEMBER,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestBalancesAPIIntegration:

    @pytest.mark.asyncio
    async def test_balance_round_trip(self, client: AsyncClient):
        """
        GIVEN: 100 spent over 3 meals, member_1 ate 1 and deposited 50
        WHEN: member_1 reads their detailed balance
        THEN: money is rendered rounded half up to two decimals
        """
        # Arrange
        await start_october(client)
        await client.post(
            f"/api/ledger/{ROOM_ID}/expenses",
            json={"description": "Groceries", "amount": "100", "expense_date": "2026-10-01"},
            headers=ADMIN,
        )
        for actor in (MEMBER, OTHER_MEMBER, ADMIN):
            await client.post(
                f"/api/ledger/{ROOM_ID}/meals",
                json={"meal_date": "2026-10-01", "meal_type": "LUNCH"},
                headers=actor,
            )
        await client.post(
            f"/api/ledger/{ROOM_ID}/transactions",
            json={"target_user_id": "member_1", "amount": "50", "transaction_type": "DEPOSIT"},
            headers=ADMIN,
        )

        # Act
        response = await client.get(f"/api/balances/{ROOM_ID}/user?include_details=true", headers=MEMBER)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["balance"] == "50.00"
        assert data["meal_rate"] == "33.33"
        assert data["total_spent"] == "33.33"
        assert data["available_balance"] == "16.67"
        assert data["meal_count"] == 1

    @pytest.mark.asyncio
    async def test_basic_balance_omits_details(self, client: AsyncClient):
        await start_october(client)

        response = await client.get(f"/api/balances/{ROOM_ID}/user", headers=MEMBER)

        assert response.status_code == 200
        assert "available_balance" not in response.json()
        assert response.json()["balance"] == "0.00"

    @pytest.mark.asyncio
    async def test_member_cannot_read_group_summary(self, client: AsyncClient):
        response = await client.get(f"/api/balances/{ROOM_ID}/group", headers=MEMBER)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_group_summary_for_admin(self, client: AsyncClient):
        await start_october(client)

        response = await client.get(f"/api/balances/{ROOM_ID}/group?include_details=true", headers=ADMIN)

        assert response.status_code == 200
        data = response.json()
        assert len(data["users"]) == 4
        assert data["totals"]["total_balance"] == "0.00"
        assert data["totals"]["net_group_balance"] == "0.00"

    @pytest.mark.asyncio
    async def test_outsider_rejected(self, client: AsyncClient):
        response = await client.get(f"/api/balances/{ROOM_ID}/meal-rate", headers={"X-User-Id": "stranger"})

        assert response.status_code == 403
