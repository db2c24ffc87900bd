"""Blast-chill views: open batches, batches completed today, batch listing."""

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.tenant.food_temperature_log import FoodTemperatureLog
from app.services.blast_ledger import find_open_start, list_open_batches, list_today_batches
from app.utils.dates import utc_day_start, utc_now

URL = "/api/temp-logs"


def day_start():
    return utc_day_start(utc_now())


def at(minutes: int) -> str:
    return (day_start() + timedelta(hours=1, minutes=minutes)).isoformat()


@pytest.mark.api
@pytest.mark.asyncio
class TestBlastViews:

    async def test_closed_batch_listed_today(self, client: AsyncClient, staff_headers):
        """START bc1 65 °C, END bc1 3 °C forty minutes later."""
        await client.post(URL, headers=staff_headers, json={
            "food_name": "Lasagne", "temp_c": 65.0, "blast_event": "START",
            "batch_id": "bc1", "logged_at": at(0),
        })
        await client.post(URL, headers=staff_headers, json={
            "food_name": "Lasagne", "temp_c": 3.0, "blast_event": "END",
            "batch_id": "bc1", "logged_at": at(40),
        })

        today = (await client.get(f"{URL}/blast/today", headers=staff_headers)).json()["today"]
        assert len(today) == 1
        batch = today[0]
        assert batch["batch_id"] == "bc1"
        assert batch["minutes"] == 40
        assert batch["status"] == "OK"
        assert batch["start_temp_c"] == 65.0
        assert batch["end_temp_c"] == 3.0
        assert batch["start_by"] == "cook@example.com"
        assert batch["end_by"] == "cook@example.com"
        assert batch["has_start"] is True
        assert batch["legacy"] is False

        opened = (await client.get(f"{URL}/blast/open", headers=staff_headers)).json()["open"]
        assert opened == []

    async def test_open_batch_not_in_today(self, client: AsyncClient, staff_headers):
        """START bc2 70 °C with no END is open and not completed."""
        await client.post(URL, headers=staff_headers, json={
            "food_name": "Soup", "temp_c": 70.0, "blast_event": "START",
            "batch_id": "bc2", "logged_at": at(0),
        })

        opened = (await client.get(f"{URL}/blast/open", headers=staff_headers)).json()["open"]
        assert [b["batch_id"] for b in opened] == ["bc2"]
        assert opened[0]["status"] == "IN_PROGRESS"
        assert opened[0]["minutes"] is None
        assert opened[0]["start_by"] == "cook@example.com"

        today = (await client.get(f"{URL}/blast/today", headers=staff_headers)).json()["today"]
        assert today == []

    async def test_today_newest_first_with_both_users(
        self, client: AsyncClient, staff_headers, admin_headers,
    ):
        for batch_id, offset in (("bc_a", 0), ("bc_b", 100)):
            await client.post(URL, headers=staff_headers, json={
                "food_name": "Stock", "temp_c": 80.0, "blast_event": "START",
                "batch_id": batch_id, "logged_at": at(offset),
            })
            await client.post(URL, headers=admin_headers, json={
                "food_name": "Stock", "temp_c": 4.0, "blast_event": "END",
                "batch_id": batch_id, "logged_at": at(offset + 30),
            })

        today = (await client.get(f"{URL}/blast/today", headers=staff_headers)).json()["today"]
        assert [b["batch_id"] for b in today] == ["bc_b", "bc_a"]
        assert all(b["start_by"] == "cook@example.com" for b in today)
        assert all(b["end_by"] == "Head Chef" for b in today)

    async def test_batch_listing(self, client: AsyncClient, staff_headers):
        await client.post(URL, headers=staff_headers, json={
            "food_name": "Rice", "temp_c": 90.0, "blast_event": "START",
            "batch_id": "bc_r", "logged_at": at(0),
        })
        await client.post(URL, headers=staff_headers, json={
            "food_name": "Rice", "temp_c": 4.0, "blast_event": "END",
            "batch_id": "bc_r", "logged_at": at(20),
        })
        await client.post(URL, headers=staff_headers, json={
            "food_name": "Soup", "temp_c": 70.0, "blast_event": "START",
            "batch_id": "bc_s", "logged_at": at(30),
        })
        # Standard readings never show up as batches
        await client.post(URL, headers=staff_headers, json={
            "food_name": "Fridge 1", "temp_c": 3.0, "period": "AM", "logged_at": at(5),
        })

        resp = await client.get(f"{URL}/blast/batches", headers=staff_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert "from" in data
        assert [(b["batch_id"], b["status"]) for b in data["batches"]] == [
            ("bc_s", "IN_PROGRESS"),
            ("bc_r", "OK"),
        ]

    async def test_batch_listing_rejects_inverted_window(self, client: AsyncClient, staff_headers):
        now = utc_now()
        resp = await client.get(f"{URL}/blast/batches", headers=staff_headers, params={
            "from": now.isoformat(), "to": (now - timedelta(hours=1)).isoformat(),
        })
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "INVALID_RANGE"


@pytest.mark.integration
@pytest.mark.asyncio
class TestLegacyRows:
    """Rows written before the blast_event / batch_id columns existed."""

    @pytest_asyncio.fixture(autouse=True)
    async def _seed(self, db_session: AsyncSession, test_property, test_staff):
        start = day_start() + timedelta(hours=2)
        rows = [
            ("Chilli", start, 75.0, "[BLAST_CHILL_START] pot 1", "OK"),
            ("Chilli", start + timedelta(minutes=50), 4.0,
             "[BLAST_CHILL_END] pot 1 (mins=50)", "OK"),
            ("Curry", start, 72.0, "[BLAST_CHILL_START] [BC:bc_old] ", "OK"),
            ("Stew", start + timedelta(minutes=10), 70.0, "[BLAST_CHILL_START]", "OK"),
            ("Pie", start + timedelta(minutes=5), 6.0, "[BLAST_CHILL_END] [BC:bc_lost]",
             "OUT_OF_RANGE"),
        ]
        for food, logged_at, temp, notes, status in rows:
            db_session.add(FoodTemperatureLog(
                property_id=test_property.id, logged_at=logged_at, log_date=logged_at.date(),
                food_name=food, temp_c=temp, notes=notes, status=status,
                created_by_user_id=test_staff.id,
            ))
        await db_session.flush()

    async def test_open_from_tags(self, db_session: AsyncSession, test_property):
        opened = await list_open_batches(db_session, test_property.id)
        assert [(b.food_name, b.batch_id) for b in opened] == [("Stew", None), ("Curry", "bc_old")]
        assert opened[0].legacy

    async def test_today_includes_name_paired_and_orphan_end(
        self, db_session: AsyncSession, test_property,
    ):
        today = await list_today_batches(db_session, test_property.id)
        by_food = {b.food_name: b for b in today}
        assert set(by_food) == {"Chilli", "Pie"}

        assert by_food["Chilli"].legacy
        assert by_food["Chilli"].minutes == 50
        assert by_food["Chilli"].notes == "pot 1"

        assert by_food["Pie"].has_start is False
        assert by_food["Pie"].status == "OUT_OF_RANGE"

    async def test_find_open_start_from_tag(self, db_session: AsyncSession, test_property):
        batch = await find_open_start(db_session, test_property.id, batch_id="bc_old")
        assert batch is not None
        assert batch.food_name == "Curry"
        assert await find_open_start(db_session, test_property.id, batch_id="bc_lost") is None

    async def test_end_closes_tagged_start(self, client: AsyncClient, staff_headers):
        resp = await client.post(URL, headers=staff_headers, json={
            "food_name": "Curry", "temp_c": 3.0, "blast_event": "END", "batch_id": "bc_old",
            "logged_at": (day_start() + timedelta(hours=3)).isoformat(),
        })
        assert resp.status_code == 201
        assert resp.json()["log"]["status"] == "OK"
        assert resp.json()["log"]["notes"] == "(mins=60)"

    async def test_end_with_unknown_id_closes_legacy_start(self, client: AsyncClient, staff_headers):
        resp = await client.post(URL, headers=staff_headers, json={
            "food_name": "Stew", "temp_c": 4.0, "blast_event": "END", "batch_id": "bc_typo",
            "logged_at": (day_start() + timedelta(hours=3)).isoformat(),
        })
        assert resp.status_code == 201
        assert resp.json()["log"]["batch_id"] == "bc_typo"
        assert resp.json()["log"]["notes"] == "(mins=50)"

        opened = (await client.get(f"{URL}/blast/open", headers=staff_headers)).json()["open"]
        assert [b["food_name"] for b in opened] == ["Curry"]
