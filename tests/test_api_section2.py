"""Tests for Section 2 API endpoints."""

import pytest
from httpx import AsyncClient


class TestMaturitySelection:
    """Tests for maturity selection endpoints."""

    @pytest.mark.asyncio
    async def test_upsert_and_get(self, client: AsyncClient):
        resp = await client.post(
            "/api/section2/maturity-selection",
            json={"risk_id": "r1", "selected_level": 2, "target_level": 4},
        )
        assert resp.status_code == 200
        first_id = resp.json()["id"]

        resp = await client.post(
            "/api/section2/maturity-selection",
            json={
                "risk_id": "r1",
                "selected_level": 2,
                "target_level": 5,
                "target_maturity_score": 5.2,
            },
        )
        assert resp.status_code == 200
        assert resp.json()["id"] == first_id

        resp = await client.get("/api/section2/maturity-selection/r1")
        assert resp.status_code == 200
        data = resp.json()
        assert data["target_level"] == 5
        assert data["target_maturity_score"] == 5.2

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient):
        resp = await client.post("/api/section2/maturity-selection", json={"risk_id": "r1"})
        assert resp.status_code == 400
        data = resp.json()
        assert data["kind"] == "validation_error"
        assert data["fields"] == ["selected_level", "target_level"]

    @pytest.mark.asyncio
    async def test_not_found(self, client: AsyncClient):
        resp = await client.get("/api/section2/maturity-selection/unknown")
        assert resp.status_code == 404
        assert resp.json()["kind"] == "not_found"


class TestGapAnalysisSnapshot:
    """Tests for gap analysis snapshot endpoints."""

    @pytest.mark.asyncio
    async def test_defaults_reported(self, client: AsyncClient):
        resp = await client.post(
            "/api/section2/gap-analysis",
            json={"risk_id": "r1", "current_level": 2, "target_level": 4, "gap_count": 3},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["current_score"] == pytest.approx(2.2)
        assert data["target_score"] == pytest.approx(4.5)
        assert data["gap_count"] == 3
        assert data["effort_estimate"] == "medium"
        assert "gap_count" not in data["defaulted_fields"]
        assert "current_score" in data["defaulted_fields"]

    @pytest.mark.asyncio
    async def test_upsert_and_read_back(self, client: AsyncClient):
        await client.post(
            "/api/section2/gap-analysis",
            json={"risk_id": "r1", "current_level": 2, "target_level": 4},
        )
        await client.post(
            "/api/section2/gap-analysis",
            json={
                "risk_id": "r1",
                "current_level": 3,
                "target_level": 4,
                "missing_controls": ["Vendor Master Review"],
                "suggested_controls": [{"template_id": "tmpl-7", "title": "Review"}],
            },
        )

        resp = await client.get("/api/section2/gap-analysis/r1")
        assert resp.status_code == 200
        data = resp.json()
        assert data["current_level"] == 3
        assert data["missing_controls"] == ["Vendor Master Review"]
        assert data["suggested_controls"][0]["template_id"] == "tmpl-7"

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient):
        resp = await client.post("/api/section2/gap-analysis", json={"current_level": 1})
        assert resp.status_code == 400
        assert resp.json()["fields"] == ["risk_id", "target_level"]

    @pytest.mark.asyncio
    async def test_not_found(self, client: AsyncClient):
        resp = await client.get("/api/section2/gap-analysis/unknown")
        assert resp.status_code == 404


class TestConcreteControls:
    """Tests for accepted and recorded control endpoints."""

    @pytest.mark.asyncio
    async def test_accept_defaults(self, client: AsyncClient):
        resp = await client.post(
            "/api/section2/accept-control",
            json={"risk_id": "r1", "template_id": "tmpl-7", "customizations": {}},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["source"] == "ai_suggested"
        assert data["status"] == "planned"
        assert data["control_type"] == "detective"
        assert data["objectives"] == ["operations"]
        assert data["title"] == "Control from template tmpl-7"

        resp = await client.get("/api/section2/controls/r1")
        assert [c["template_id"] for c in resp.json()] == ["tmpl-7"]

    @pytest.mark.asyncio
    async def test_accept_invalid_type(self, client: AsyncClient):
        resp = await client.post(
            "/api/section2/accept-control",
            json={"risk_id": "r1", "template_id": "t", "customizations": {"type": "advisory"}},
        )
        assert resp.status_code == 400
        assert resp.json()["fields"] == ["customizations.type"]

        resp = await client.get("/api/section2/controls/r1")
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_accept_missing_fields(self, client: AsyncClient):
        resp = await client.post("/api/section2/accept-control", json={})
        assert resp.status_code == 400
        assert resp.json()["fields"] == ["risk_id", "template_id"]

    @pytest.mark.asyncio
    async def test_record_control(self, client: AsyncClient):
        resp = await client.post(
            "/api/section2/controls",
            json={
                "risk_id": "r1",
                "title": "Weekly payment run approval",
                "control_type": "preventive",
                "objectives": ["financial"],
            },
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "existing"
        assert data["source"] == "existing_documented"
        assert data["maturity_level"] == 1
        assert data["objectives"] == ["financial"]

    @pytest.mark.asyncio
    async def test_list_empty(self, client: AsyncClient):
        resp = await client.get("/api/section2/controls/nobody")
        assert resp.status_code == 200
        assert resp.json() == []
