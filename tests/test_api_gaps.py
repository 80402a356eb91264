"""Tests for catalog, gap detection and to-be control API endpoints."""

import pytest
from httpx import AsyncClient

ABC_PAYLOADS = [
    {
        "control_name": "A",
        "control_objective": "Applies to every process",
        "control_type": "preventive",
        "domain_tag": "ops",
        "applicability_rule": {"kind": "always"},
    },
    {
        "control_name": "B",
        "control_objective": "Applies to automated processes",
        "control_type": "detective",
        "domain_tag": "reporting",
        "applicability_rule": {"kind": "maturity_profile", "tags": ["automated"]},
    },
    {
        "control_name": "C",
        "control_objective": "Applies to ERP-enabled processes",
        "control_type": "corrective",
        "domain_tag": "financial",
        "typical_frequency": "quarterly",
        "applicability_rule": {"kind": "maturity_profile", "tags": ["erp-enabled"]},
    },
    {
        "control_name": "R",
        "control_objective": "Applies to regulated processes",
        "control_type": "preventive",
        "domain_tag": "compliance",
        "applicability_rule": {"kind": "org_flag", "flag": "regulated"},
    },
]


async def seed_abc(client: AsyncClient) -> dict[str, str]:
    """Create the test catalog; return ids by control name."""
    ids = {}
    for payload in ABC_PAYLOADS:
        resp = await client.post("/api/standard-controls/", json=payload)
        assert resp.status_code == 201
        ids[payload["control_name"]] = resp.json()["id"]
    return ids


async def prepare_process(client: AsyncClient, ids: dict[str, str], **flags) -> str:
    """Process with an ERP profile whose only existing control covers A."""
    resp = await client.post("/api/processes/", json={"process_name": "Procure to Pay", **flags})
    process_id = resp.json()["id"]

    resp = await client.post(
        "/api/maturity-assessments/",
        json={
            "process_id": process_id,
            "answers": {
                "automation": "erp",
                "processStructure": "centralized",
                "failureImpact": "high",
            },
        },
    )
    assert resp.status_code == 200

    resp = await client.post(
        "/api/as-is-controls/",
        json={
            "process_id": process_id,
            "control_name": "Existing A",
            "status": "exists",
            "mapped_std_control_id": ids["A"],
        },
    )
    assert resp.status_code == 201
    return process_id


class TestStandardControls:
    """Tests for catalog endpoints."""

    @pytest.mark.asyncio
    async def test_list(self, client: AsyncClient):
        await seed_abc(client)

        resp = await client.get("/api/standard-controls/")
        assert resp.status_code == 200
        data = resp.json()
        assert [c["control_name"] for c in data] == ["A", "B", "C", "R"]
        assert data[1]["applicability_rule"] == {"kind": "maturity_profile", "tags": ["automated"]}

    @pytest.mark.asyncio
    async def test_list_by_domain(self, client: AsyncClient):
        await seed_abc(client)
        resp = await client.get("/api/standard-controls/", params={"domain_tag": "financial"})
        assert [c["control_name"] for c in resp.json()] == ["C"]

    @pytest.mark.asyncio
    async def test_by_profile(self, client: AsyncClient):
        await seed_abc(client)

        resp = await client.get("/api/standard-controls/by-profile/erp-enabled,centralized")
        assert resp.status_code == 200
        assert [c["control_name"] for c in resp.json()] == ["A", "C"]

    @pytest.mark.asyncio
    async def test_by_profile_with_flag(self, client: AsyncClient):
        await seed_abc(client)

        resp = await client.get(
            "/api/standard-controls/by-profile/automated", params={"regulated": "true"}
        )
        assert [c["control_name"] for c in resp.json()] == ["A", "B", "R"]

    @pytest.mark.asyncio
    async def test_create_rejects_bad_rule(self, client: AsyncClient):
        payload = dict(ABC_PAYLOADS[0], applicability_rule={"kind": "maturity_profile", "tags": []})
        resp = await client.post("/api/standard-controls/", json=payload)
        assert resp.status_code == 400
        assert resp.json()["kind"] == "validation_error"


class TestGapAnalysis:
    """Tests for gap detection endpoints."""

    @pytest.mark.asyncio
    async def test_analyze(self, client: AsyncClient):
        ids = await seed_abc(client)
        process_id = await prepare_process(client, ids)

        resp = await client.post(
            "/api/gaps/analyze", json={"process_id": process_id, "risk_id": "r1"}
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["count"] == 1
        assert data["created"] == 1
        assert data["applicable_count"] == 2
        assert data["coverage_percentage"] == 50.0
        assert data["maturity_profile"] == ["erp-enabled", "centralized", "high-risk"]
        gap = data["gaps"][0]
        assert gap["std_control_id"] == ids["C"]
        assert gap["gap_type"] == "missing"
        assert gap["std_control"]["control_name"] == "C"
        assert gap["to_be_control"] is None

    @pytest.mark.asyncio
    async def test_analyze_twice(self, client: AsyncClient):
        ids = await seed_abc(client)
        process_id = await prepare_process(client, ids)
        body = {"process_id": process_id, "risk_id": "r1"}

        first = (await client.post("/api/gaps/analyze", json=body)).json()
        second = (await client.post("/api/gaps/analyze", json=body)).json()

        assert first["count"] == second["count"] == 1
        assert second["created"] == 0

        resp = await client.get(f"/api/gaps/process/{process_id}")
        assert len(resp.json()) == 1

    @pytest.mark.asyncio
    async def test_regulated_process(self, client: AsyncClient):
        ids = await seed_abc(client)
        process_id = await prepare_process(client, ids, regulated=True)

        resp = await client.post(
            "/api/gaps/analyze", json={"process_id": process_id, "risk_id": "r1"}
        )

        data = resp.json()
        assert data["org_flags"] == ["regulated"]
        assert {g["std_control_id"] for g in data["gaps"]} == {ids["C"], ids["R"]}

    @pytest.mark.asyncio
    async def test_analyze_without_assessment(self, client: AsyncClient):
        resp = await client.post("/api/processes/", json={"process_name": "Fresh"})
        process_id = resp.json()["id"]

        resp = await client.post(
            "/api/gaps/analyze", json={"process_id": process_id, "risk_id": "r1"}
        )

        assert resp.status_code == 400
        assert resp.json()["kind"] == "precondition_failed"

    @pytest.mark.asyncio
    async def test_analyze_missing_fields(self, client: AsyncClient):
        resp = await client.post("/api/gaps/analyze", json={"process_id": "p1"})
        assert resp.status_code == 400
        data = resp.json()
        assert data["kind"] == "validation_error"
        assert data["fields"] == ["risk_id"]

    @pytest.mark.asyncio
    async def test_list_filtered_by_risk(self, client: AsyncClient):
        ids = await seed_abc(client)
        process_id = await prepare_process(client, ids)
        for risk_id in ("r1", "r2"):
            await client.post(
                "/api/gaps/analyze", json={"process_id": process_id, "risk_id": risk_id}
            )

        resp = await client.get(f"/api/gaps/process/{process_id}", params={"risk_id": "r2"})
        assert [g["risk_id"] for g in resp.json()] == ["r2"]


class TestToBeControls:
    """Tests for to-be control endpoints."""

    @pytest.mark.asyncio
    async def test_generate_links_gap(self, client: AsyncClient):
        ids = await seed_abc(client)
        process_id = await prepare_process(client, ids)
        body = {"process_id": process_id, "risk_id": "r1"}
        await client.post("/api/gaps/analyze", json=body)

        resp = await client.post("/api/to-be-controls/generate", json=body)

        assert resp.status_code == 200
        data = resp.json()
        assert data["count"] == 1
        control = data["controls"][0]
        assert control["control_type"] == "corrective"
        assert control["domain_tag"] == "financial"
        assert control["frequency"] == "quarterly"
        assert control["implementation_guidance"] == "Implement C to address missing gap"

        gaps = (await client.get(f"/api/gaps/process/{process_id}")).json()
        assert gaps[0]["recommended_to_be_control_id"] == control["id"]
        assert gaps[0]["to_be_control"]["domain_tag"] == gaps[0]["std_control"]["domain_tag"]

        again = (await client.post("/api/to-be-controls/generate", json=body)).json()
        assert again["count"] == 0
        assert again["skipped"] == 1

    @pytest.mark.asyncio
    async def test_list_and_update(self, client: AsyncClient):
        ids = await seed_abc(client)
        process_id = await prepare_process(client, ids)
        body = {"process_id": process_id, "risk_id": "r1"}
        await client.post("/api/gaps/analyze", json=body)
        await client.post("/api/to-be-controls/generate", json=body)

        listed = (await client.get(f"/api/to-be-controls/process/{process_id}")).json()
        assert len(listed) == 1

        resp = await client.patch(
            f"/api/to-be-controls/{listed[0]['id']}",
            json={"implementation_status": "live", "owner_role": "Controller"},
        )
        assert resp.status_code == 200
        assert resp.json()["implementation_status"] == "live"
        assert resp.json()["owner_role"] == "Controller"

    @pytest.mark.asyncio
    async def test_update_invalid_status(self, client: AsyncClient):
        resp = await client.patch(
            "/api/to-be-controls/anything", json={"implementation_status": "finished"}
        )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_update_unknown(self, client: AsyncClient):
        resp = await client.patch("/api/to-be-controls/nope", json={"owner_role": "X"})
        assert resp.status_code == 404
