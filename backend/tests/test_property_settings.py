"""Property settings endpoint tests."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.utils.dates import utc_day_start, utc_now

URL = "/api/property-settings"


@pytest.mark.api
@pytest.mark.asyncio
class TestPropertySettings:

    async def test_defaults_created_on_first_read(self, client: AsyncClient, staff_headers, test_property):
        resp = await client.get(URL, headers=staff_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["property_id"] == test_property.id
        assert data["blast_chill_target_tenth_c"] == 50
        assert data["blast_chill_max_minutes"] == 90

    async def test_admin_partial_update(self, client: AsyncClient, admin_headers, test_admin):
        resp = await client.put(URL, headers=admin_headers, json={"blast_chill_max_minutes": 120})
        assert resp.status_code == 200
        data = resp.json()
        assert data["blast_chill_max_minutes"] == 120
        assert data["blast_chill_target_tenth_c"] == 50
        assert data["updated_by_user_id"] == test_admin.id

    async def test_staff_cannot_update(self, client: AsyncClient, staff_headers):
        resp = await client.put(URL, headers=staff_headers, json={"blast_chill_max_minutes": 120})
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "PERMISSION_DENIED"

    async def test_out_of_bounds_rejected(self, client: AsyncClient, admin_headers):
        resp = await client.put(URL, headers=admin_headers, json={"blast_chill_max_minutes": 0})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_change_does_not_rescore_closed_batches(
        self, client: AsyncClient, admin_headers, staff_headers,
    ):
        base = utc_day_start(utc_now()) + timedelta(hours=1)
        await client.post("/api/temp-logs", headers=staff_headers, json={
            "food_name": "Lasagne", "temp_c": 65.0, "blast_event": "START",
            "batch_id": "bc1", "logged_at": base.isoformat(),
        })
        await client.post("/api/temp-logs", headers=staff_headers, json={
            "food_name": "Lasagne", "temp_c": 4.5, "blast_event": "END",
            "batch_id": "bc1", "logged_at": (base + timedelta(minutes=40)).isoformat(),
        })

        await client.put(URL, headers=admin_headers, json={"blast_chill_target_tenth_c": 30})

        today = (await client.get("/api/temp-logs/blast/today", headers=staff_headers)).json()
        assert today["today"][0]["status"] == "OK"
