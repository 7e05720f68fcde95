from pydantic import SecretStr
import pytest

from repairdesk.core.config import settings

ADMIN = "/api/v1/admin"


@pytest.fixture(autouse=True)
def _week(standard_week):
    return standard_week


class TestAdminAuth:
    def test_missing_header(self, client, admin_headers):
        response = client.get(f"{ADMIN}/business-hours")

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "ADMIN_AUTH_REQUIRED"

    def test_wrong_token(self, client, admin_headers):
        response = client.get(f"{ADMIN}/business-hours", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "ADMIN_AUTH_INVALID"

    def test_unconfigured_token_rejects_everything(self, client, monkeypatch):
        monkeypatch.setattr(settings, "admin_api_token", SecretStr(""))

        response = client.post(f"{ADMIN}/slots/generate", headers={"Authorization": "Bearer "})

        assert response.status_code == 401

    def test_public_routes_need_no_token(self, client):
        assert client.get("/api/v1/public/availability").status_code == 200


class TestBusinessHoursRoutes:
    def test_list_and_get(self, client, admin_headers):
        response = client.get(f"{ADMIN}/business-hours", headers=admin_headers)

        assert response.status_code == 200
        rows = response.json()
        assert [r["dayName"] for r in rows][:2] == ["Sunday", "Monday"]
        assert rows[1]["breakStart"] == "12:00"

        monday = client.get(f"{ADMIN}/business-hours/1", headers=admin_headers).json()
        assert monday["openTime"] == "09:00"

    def test_update_refreshes_generated_slots(self, client, admin_headers):
        client.get("/api/v1/public/availability", params={"date": "2030-01-08"})

        response = client.put(
            f"{ADMIN}/business-hours/2",
            json={"openTime": "10:00", "closeTime": "15:00", "isActive": True},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["breakStart"] is None
        day = client.get("/api/v1/public/availability", params={"date": "2030-01-08"}).json()["data"]
        assert day["availableSlots"] == 10
        assert day["slots"][0]["startTime"] == "10:00"

    def test_invalid_hours(self, client, admin_headers):
        response = client.put(
            f"{ADMIN}/business-hours/2",
            json={"openTime": "15:00", "closeTime": "10:00"},
            headers=admin_headers,
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_HOURS"

    def test_invalid_day(self, client, admin_headers):
        response = client.get(f"{ADMIN}/business-hours/9", headers=admin_headers)

        assert response.status_code == 400


class TestSpecialDateRoutes:
    def test_lifecycle(self, client, admin_headers):
        created = client.post(
            f"{ADMIN}/special-dates",
            json={"date": "2030-01-09", "type": "holiday", "name": "Staff day"},
            headers=admin_headers,
        )
        assert created.status_code == 201
        assert created.json()["name"] == "Staff day"

        duplicate = client.post(
            f"{ADMIN}/special-dates", json={"date": "2030-01-09", "type": "closure"}, headers=admin_headers
        )
        assert duplicate.status_code == 409
        assert duplicate.json()["detail"]["code"] == "SPECIAL_DATE_EXISTS"

        day = client.get("/api/v1/public/availability", params={"date": "2030-01-09"}).json()["data"]
        assert day["isOpen"] is False
        assert day["specialDate"] == {"type": "holiday", "name": "Staff day"}

        listed = client.get(
            f"{ADMIN}/special-dates",
            params={"startDate": "2030-01-01", "endDate": "2030-01-31"},
            headers=admin_headers,
        ).json()
        assert [s["date"] for s in listed] == ["2030-01-09"]

        removed = client.delete(f"{ADMIN}/special-dates/2030-01-09", headers=admin_headers)
        assert removed.status_code == 200
        assert removed.json()["success"] is True

        missing = client.delete(f"{ADMIN}/special-dates/2030-01-09", headers=admin_headers)
        assert missing.status_code == 404
        assert missing.json()["detail"]["code"] == "SPECIAL_DATE_NOT_FOUND"

    def test_special_hours_need_times(self, client, admin_headers):
        response = client.post(
            f"{ADMIN}/special-dates",
            json={"date": "2030-01-09", "type": "special_hours", "openTime": "10:00"},
            headers=admin_headers,
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_SPECIAL_DATE"


class TestSlotGenerationRoutes:
    def test_generate_and_status(self, client, admin_headers):
        response = client.post(
            f"{ADMIN}/slots/generate",
            json={"startDate": "2030-01-07", "endDate": "2030-01-13"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        summary = response.json()["summary"]
        assert summary == {
            "totalDays": 7,
            "successful": 6,
            "failed": 0,
            "skipped": 1,
            "slotsCreated": 78,
        }

        status = client.get(f"{ADMIN}/slots/generate", params={"days": 7}, headers=admin_headers).json()
        assert status["daysWithSlots"] == 6
        assert status["daysNeedingGeneration"] == 0

    def test_generate_defaults(self, client, admin_headers):
        response = client.post(f"{ADMIN}/slots/generate", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["startDate"] == "2030-01-07"
        assert body["summary"]["totalDays"] == 30

    def test_generate_rejects_out_of_range_duration(self, client, admin_headers):
        response = client.post(
            f"{ADMIN}/slots/generate", json={"slotDuration": 10}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"]["details"]["field"] == "slot_duration"


class TestOperationalRoutes:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "ok"

    def test_prometheus_metrics(self, client):
        client.get("/api/v1/public/availability", params={"date": "2030-01-08"})

        response = client.get("/metrics/prometheus")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "repairdesk_service_operations_total" in response.text
        assert "repairdesk_slots_generated_total" in response.text
