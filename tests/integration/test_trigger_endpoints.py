"""Integration tests for the endpoints that trigger fraud rescoring."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_current_user
from src.db.database import get_session
from src.db.models import Audit, CheckIn, Transaction, User
from src.main import app
from tests.conftest import make_mock_session, override_get_session

pytestmark = pytest.mark.integration

NOW = datetime(2026, 3, 10, 14, 30, tzinfo=UTC)

AGENT = User(id="agent-1", role="agent", first_name="Asha")
AUDITOR = User(id="auditor-1", role="auditor")
BANK = User(id="bank-1", role="bank")

VALID_TXN = {
    "transactionType": "deposit",
    "amount": 1500,
    "customerName": "Sita Devi",
    "customerAadhaar": "123456789012",
    "latitude": 19.07,
    "longitude": 72.87,
    "deviceId": "dev-1",
}


def _client():
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


def _as(user: User, session):
    app.dependency_overrides[get_session] = override_get_session(session)
    app.dependency_overrides[get_current_user] = lambda: user


def _scorer_mock():
    scorer = MagicMock()
    scorer.recompute_safely = AsyncMock(return_value=None)
    return scorer


def _stored_transaction(**kwargs):
    fields = {
        "id": 11,
        "agent_id": "agent-1",
        "transaction_type": "deposit",
        "amount": 1500.0,
        "customer_name": "Sita Devi",
        "customer_aadhaar": "123456789012",
        "status": "completed",
        "transaction_date": NOW,
    }
    fields.update(kwargs)
    return Transaction(**fields)


class TestCreateTransaction:
    @pytest.mark.asyncio
    async def test_commits_then_rescoring_agent(self):
        session = make_mock_session()
        scorer = _scorer_mock()
        create = AsyncMock(return_value=_stored_transaction())
        _as(AGENT, session)
        try:
            with (
                patch("src.api.routes.transactions._scorer", scorer),
                patch("src.domains.portal.activity.create_transaction", create),
            ):
                async with _client() as client:
                    response = await client.post("/api/transactions", json=VALID_TXN)

            assert response.status_code == 201
            data = response.json()
            assert data["id"] == 11
            assert data["transactionType"] == "deposit"
            assert data["agentId"] == "agent-1"
            session.commit.assert_awaited_once()
            scorer.recompute_safely.assert_awaited_once_with(session, "agent-1")
            payload = create.await_args.args[2]
            assert payload.device_id == "dev-1"
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_missing_aadhaar_is_400_and_not_scored(self):
        session = make_mock_session()
        scorer = _scorer_mock()
        _as(AGENT, session)
        body = {k: v for k, v in VALID_TXN.items() if k != "customerAadhaar"}
        try:
            with patch("src.api.routes.transactions._scorer", scorer):
                async with _client() as client:
                    response = await client.post("/api/transactions", json=body)

            assert response.status_code == 400
            assert "customerAadhaar" in response.json()["message"]
            scorer.recompute_safely.assert_not_awaited()
            session.commit.assert_not_awaited()
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_forwarded_for_header_not_recorded_from_direct_client(self):
        session = make_mock_session()
        create = AsyncMock(return_value=_stored_transaction())
        _as(AGENT, session)
        try:
            with (
                patch("src.api.routes.transactions._scorer", _scorer_mock()),
                patch("src.domains.portal.activity.create_transaction", create),
            ):
                async with _client() as client:
                    response = await client.post(
                        "/api/transactions",
                        json=VALID_TXN,
                        headers={"X-Forwarded-For": "1.2.3.4"},
                    )

            assert response.status_code == 201
            assert create.await_args.args[3] == "127.0.0.1"
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_negative_amount_is_400(self):
        _as(AGENT, make_mock_session())
        try:
            async with _client() as client:
                response = await client.post(
                    "/api/transactions", json={**VALID_TXN, "amount": -5}
                )
            assert response.status_code == 400
            assert response.json()["error"] == "bad_request"
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_only_agents_may_transact(self):
        _as(BANK, make_mock_session())
        try:
            async with _client() as client:
                response = await client.post("/api/transactions", json=VALID_TXN)
            assert response.status_code == 403
            assert response.json()["error"] == "forbidden"
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_scoring_failure_does_not_fail_request(self):
        session = make_mock_session()
        create = AsyncMock(return_value=_stored_transaction())
        _as(AGENT, session)
        try:
            with (
                patch("src.domains.portal.activity.create_transaction", create),
                patch(
                    "src.domains.fraud.evidence.EvidenceAggregator.load_evidence",
                    AsyncMock(side_effect=ConnectionError("db down")),
                ),
            ):
                async with _client() as client:
                    response = await client.post("/api/transactions", json=VALID_TXN)

            assert response.status_code == 201
            session.commit.assert_awaited_once()
            session.rollback.assert_awaited_once()
        finally:
            app.dependency_overrides.clear()


class TestCreateCheckIn:
    @pytest.mark.asyncio
    async def test_multipart_check_in_rescored(self):
        session = make_mock_session()
        scorer = _scorer_mock()
        stored = CheckIn(
            id=4,
            user_id="agent-1",
            latitude=19.0,
            longitude=72.0,
            status="failed",
            match_score=98,
            check_in_date=NOW,
        )
        create = AsyncMock(return_value=stored)
        _as(AGENT, session)
        try:
            with (
                patch("src.api.routes.check_ins._scorer", scorer),
                patch("src.domains.portal.activity.create_check_in", create),
            ):
                async with _client() as client:
                    response = await client.post(
                        "/api/check-ins",
                        data={
                            "latitude": "19.0",
                            "longitude": "72.0",
                            "deviceId": "dev-1",
                            "status": "failed",
                        },
                        files={"selfie": ("me.jpg", b"jpeg-bytes", "image/jpeg")},
                    )

            assert response.status_code == 201
            assert response.json()["status"] == "failed"
            payload = create.await_args.args[2]
            assert payload.selfie_url.startswith("/uploads/selfies/")
            assert payload.device_id == "dev-1"
            scorer.recompute_safely.assert_awaited_once_with(session, "agent-1")
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_missing_coordinates_is_400(self):
        _as(AGENT, make_mock_session())
        try:
            async with _client() as client:
                response = await client.post("/api/check-ins", data={"address": "Ward 4"})
            assert response.status_code == 400
        finally:
            app.dependency_overrides.clear()


class TestCreateAudit:
    @pytest.mark.asyncio
    async def test_rescoring_targets_audited_agent(self):
        session = make_mock_session()
        scorer = _scorer_mock()
        stored = Audit(
            id=9,
            audited_user_id="agent-7",
            auditor_id="auditor-1",
            status="completed",
            priority="normal",
            evidence_urls=[],
            hash="0" * 64,
            audit_date=NOW,
            completed_date=NOW,
        )
        create = AsyncMock(return_value=stored)
        _as(AUDITOR, session)
        try:
            with (
                patch("src.api.routes.audits._scorer", scorer),
                patch("src.domains.portal.audits.create_audit", create),
            ):
                async with _client() as client:
                    response = await client.post(
                        "/api/audits",
                        data={"agentId": "agent-7", "findings": "Register short by 200"},
                        files=[("evidence", ("a.png", b"img", "image/png"))],
                    )

            assert response.status_code == 201
            assert response.json()["auditedUserId"] == "agent-7"
            assert create.await_args.args[1] == "auditor-1"
            assert create.await_args.kwargs["evidence_urls"][0].endswith(".png")
            scorer.recompute_safely.assert_awaited_once_with(session, "agent-7")
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_too_many_evidence_files(self):
        scorer = _scorer_mock()
        _as(AUDITOR, make_mock_session())
        files = [("evidence", (f"{i}.jpg", b"x", "image/jpeg")) for i in range(6)]
        try:
            with patch("src.api.routes.audits._scorer", scorer):
                async with _client() as client:
                    response = await client.post(
                        "/api/audits", data={"agentId": "agent-7"}, files=files
                    )
            assert response.status_code == 400
            scorer.recompute_safely.assert_not_awaited()
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_agents_cannot_audit(self):
        _as(AGENT, make_mock_session())
        try:
            async with _client() as client:
                response = await client.post("/api/audits", data={"agentId": "agent-7"})
            assert response.status_code == 403
        finally:
            app.dependency_overrides.clear()
