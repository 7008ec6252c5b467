"""Tests for the HTTP API."""

from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from au_payroll.api.app import create_app
from au_payroll.stp.providers import AuthorityStubProvider
from au_payroll.stp.repository import InMemoryPayEventRepository


def payslip_json(employee_id: str = "emp-1", gross: str = "1000.00", **overrides) -> dict:
    body = {
        "id": f"ps-{employee_id}",
        "employeeId": employee_id,
        "periodStart": "2024-08-02",
        "periodEnd": "2024-08-15",
        "grossPay": gross,
        "paygTax": "200.00",
        "superannuation": "115.00",
        "netPay": "800.00",
        "paymentDate": "2024-08-15",
    }
    body.update(overrides)
    return body


@pytest.fixture
def authority() -> AuthorityStubProvider:
    return AuthorityStubProvider()


@pytest_asyncio.fixture
async def client(authority) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(InMemoryPayEventRepository(), authority)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoints:
    """Test health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        """Test health reports storage status."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["storage"] == "healthy"

    @pytest.mark.asyncio
    async def test_ready_and_live(self, client):
        """Test readiness and liveness endpoints."""
        assert (await client.get("/ready")).json() == {"status": "ready"}
        assert (await client.get("/live")).json() == {"status": "alive"}


class TestAwardEndpoints:
    """Test award interpretation over HTTP."""

    @pytest.mark.asyncio
    async def test_interpret_saturday_shift(self, client):
        """Test a long Saturday shift returns loaded and overtime lines."""
        response = await client.post(
            "/api/v1/award/interpret",
            json={
                "hourlyRate": "30",
                "records": [
                    {
                        "id": "att-1",
                        "employeeId": "emp-1",
                        "date": "2024-07-06",
                        "clockIn": "2024-07-06T08:00:00Z",
                        "clockOut": "2024-07-06T18:00:00Z",
                    }
                ],
            },
        )

        assert response.status_code == 200
        [result] = response.json()
        assert result["recordId"] == "att-1"
        assert result["date"] == "2024-07-06"
        assert [c["code"] for c in result["components"]] == ["ORD", "OT"]
        assert Decimal(result["components"][0]["rate"]) == Decimal("37.50")
        assert Decimal(result["gross"]) == Decimal("390.00")

    @pytest.mark.asyncio
    async def test_incomplete_record_has_no_components(self, client):
        """Test a record without clock out returns an empty line list."""
        response = await client.post(
            "/api/v1/award/interpret",
            json={
                "hourlyRate": "30",
                "records": [
                    {
                        "id": "att-2",
                        "employeeId": "emp-1",
                        "date": "2024-07-03",
                        "clockIn": "2024-07-03T09:00:00Z",
                    }
                ],
            },
        )

        assert response.status_code == 200
        assert response.json()[0]["components"] == []

    @pytest.mark.asyncio
    async def test_negative_rate_is_refused(self, client):
        """Test request validation on the hourly rate."""
        response = await client.post(
            "/api/v1/award/interpret", json={"hourlyRate": "-1", "records": []}
        )

        assert response.status_code == 422


class TestSuperAndLeaveEndpoints:
    """Test super and leave lookups over HTTP."""

    @pytest.mark.asyncio
    async def test_super_rate_with_contribution(self, client):
        """Test rate lookup with a contribution amount."""
        response = await client.get(
            "/api/v1/super/rate", params={"date": "2024-12-01", "ote": "1000"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["date"] == "2024-12-01"
        assert Decimal(data["rate"]) == Decimal("11.5")
        assert Decimal(data["contribution"]) == Decimal("115.00")

    @pytest.mark.asyncio
    async def test_super_rate_fallback(self, client):
        """Test dates before the schedule get the fallback rate."""
        response = await client.get("/api/v1/super/rate", params={"date": "2022-01-01"})

        assert Decimal(response.json()["rate"]) == Decimal("11.0")
        assert response.json()["contribution"] is None

    @pytest.mark.asyncio
    async def test_accrue_leave(self, client):
        """Test leave accrual for a fortnight's hours."""
        response = await client.post(
            "/api/v1/leave/accrue", json={"ordinaryHours": "76", "overtimeHours": "4"}
        )

        assert response.status_code == 200
        data = response.json()
        assert [d["leaveType"] for d in data] == ["Annual", "Sick"]
        assert Decimal(data[0]["accruedAmount"]) == Decimal("5.8444")


class TestPayEventEndpoints:
    """Test STP pay event lifecycle over HTTP."""

    @pytest.mark.asyncio
    async def test_generate_and_fetch_event(self, client):
        """Test generating a Draft event and reading it back."""
        response = await client.post(
            "/api/v1/stp/events",
            json={"payRunId": "run-1", "payslips": [payslip_json(), payslip_json("emp-2")]},
        )

        assert response.status_code == 201
        event = response.json()
        assert event["status"] == "Draft"
        assert event["employeeCount"] == 2
        assert event["reportingYear"] == 2025
        assert Decimal(event["totalGross"]) == Decimal("2000.00")
        assert Decimal(event["payees"][0]["ytdGross"]) == Decimal("1000.00")

        fetched = await client.get(f"/api/v1/stp/events/{event['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["transactionId"] == event["transactionId"]

    @pytest.mark.asyncio
    async def test_list_events_by_year(self, client):
        """Test listing filters by financial year."""
        await client.post(
            "/api/v1/stp/events", json={"payRunId": "run-1", "payslips": [payslip_json()]}
        )

        assert len((await client.get("/api/v1/stp/events", params={"year": 2025})).json()) == 1
        assert (await client.get("/api/v1/stp/events", params={"year": 2024})).json() == []
        assert len((await client.get("/api/v1/stp/events")).json()) == 1

    @pytest.mark.asyncio
    async def test_run_across_financial_years_is_422(self, client):
        """Test a run paid either side of 30 June is refused."""
        response = await client.post(
            "/api/v1/stp/events",
            json={
                "payRunId": "run-eofy",
                "payslips": [
                    payslip_json(paymentDate="2024-06-27"),
                    payslip_json("emp-2", paymentDate="2024-07-11"),
                ],
            },
        )

        assert response.status_code == 422
        assert "spans financial years" in response.json()["detail"]
        assert (await client.get("/api/v1/stp/events")).json() == []

    @pytest.mark.asyncio
    async def test_mismatched_reporting_year_is_422(self, client):
        """Test an explicit year outside the payment dates is refused."""
        response = await client.post(
            "/api/v1/stp/events",
            json={"payRunId": "run-1", "payslips": [payslip_json()], "reportingYear": 2030},
        )

        assert response.status_code == 422
        assert "not reporting year 2030" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_event_is_404(self, client):
        """Test unknown event ids return 404."""
        assert (await client.get("/api/v1/stp/events/STP-missing")).status_code == 404
        assert (await client.post("/api/v1/stp/events/STP-missing/submit")).status_code == 404

    @pytest.mark.asyncio
    async def test_submit_accepted(self, client):
        """Test an accepted submission marks the event Submitted."""
        created = (
            await client.post(
                "/api/v1/stp/events", json={"payRunId": "run-1", "payslips": [payslip_json()]}
            )
        ).json()

        response = await client.post(f"/api/v1/stp/events/{created['id']}/submit")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["outcome"] == "Accepted"
        stored = (await client.get(f"/api/v1/stp/events/{created['id']}")).json()
        assert stored["status"] == "Submitted"

    @pytest.mark.asyncio
    async def test_resubmit_is_validation_failure(self, client):
        """Test submitting twice returns 422 without contacting the authority."""
        created = (
            await client.post(
                "/api/v1/stp/events", json={"payRunId": "run-1", "payslips": [payslip_json()]}
            )
        ).json()
        await client.post(f"/api/v1/stp/events/{created['id']}/submit")

        response = await client.post(f"/api/v1/stp/events/{created['id']}/submit")

        assert response.status_code == 422
        assert response.json()["outcome"] == "ValidationFailed"

    @pytest.mark.asyncio
    async def test_negative_gross_is_refused_locally(self, client, authority):
        """Test negative gross events never reach the authority."""
        created = (
            await client.post(
                "/api/v1/stp/events",
                json={"payRunId": "run-neg", "payslips": [payslip_json(gross="-1")]},
            )
        ).json()

        response = await client.post(f"/api/v1/stp/events/{created['id']}/submit")

        assert response.status_code == 422
        assert "Total Gross cannot be negative." in response.json()["message"]
        assert authority.received == {}

    @pytest.mark.asyncio
    async def test_rejection_is_200_with_failure(self, client, authority):
        """Test an authority rejection is reported without an HTTP error."""
        authority.simulate_rejection("Invalid ABN")
        created = (
            await client.post(
                "/api/v1/stp/events", json={"payRunId": "run-1", "payslips": [payslip_json()]}
            )
        ).json()

        response = await client.post(f"/api/v1/stp/events/{created['id']}/submit")

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["outcome"] == "Rejected"
        stored = (await client.get(f"/api/v1/stp/events/{created['id']}")).json()
        assert stored["rejected"] is True
        assert stored["status"] == "Draft"

    @pytest.mark.asyncio
    async def test_outage_is_503_and_retryable(self, client, authority):
        """Test transport failures return 503 with retryable set."""
        authority.simulate_outage()
        created = (
            await client.post(
                "/api/v1/stp/events", json={"payRunId": "run-1", "payslips": [payslip_json()]}
            )
        ).json()

        response = await client.post(f"/api/v1/stp/events/{created['id']}/submit")

        assert response.status_code == 503
        assert response.json()["retryable"] is True

    @pytest.mark.asyncio
    async def test_empty_pay_run_id_is_refused(self, client):
        """Test request validation on the pay run id."""
        response = await client.post("/api/v1/stp/events", json={"payRunId": "", "payslips": []})

        assert response.status_code == 422
