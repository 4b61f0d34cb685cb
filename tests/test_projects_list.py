"""GET /api/projects — scoping, filters, pagination."""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_unrestricted_token_sees_everything(client: AsyncClient, org, make_token, make_project):
    await make_project("A", pole_id=org["pole_a"])
    await make_project("B", pole_id=org["pole_b"])
    await make_project("Unplaced")
    raw, _ = await make_token()

    resp = await client.get("/api/projects", headers={"X-API-Key": raw})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert {p["title"] for p in body["data"]} == {"A", "B", "Unplaced"}
    assert body["pagination"] == {"limit": 50, "offset": 0, "total": 3}


@pytest.mark.asyncio
async def test_pole_scope_with_status_filter_and_limit(client: AsyncClient, org, make_token, make_project):
    for i in range(12):
        await make_project(f"P1 running {i}", pole_id=org["pole_a"], status="in_progress")
    await make_project("P1 done", pole_id=org["pole_a"], status="completed")
    await make_project("P2 running", pole_id=org["pole_b"], status="in_progress")
    raw, _ = await make_token({"pole_ids": [str(org["pole_a"])], "data_types": ["projects"]})

    resp = await client.get(
        "/api/projects",
        params={"status": "in_progress", "limit": "10"},
        headers={"X-API-Key": raw},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["data"]) == 10
    assert all(p["pole_id"] == str(org["pole_a"]) for p in body["data"])
    assert all(p["status"] == "in_progress" for p in body["data"])
    assert body["pagination"] == {"limit": 10, "offset": 0, "total": 12}


@pytest.mark.asyncio
async def test_limit_is_capped_at_100(client: AsyncClient, make_token, make_project):
    for i in range(105):
        await make_project(f"Bulk {i:03d}")
    raw, _ = await make_token()

    resp = await client.get("/api/projects", params={"limit": "500"}, headers={"X-API-Key": raw})
    body = resp.json()
    assert len(body["data"]) == 100
    assert body["pagination"]["limit"] == 100
    assert body["pagination"]["total"] == 105


@pytest.mark.asyncio
async def test_offset_pages_through_results(client: AsyncClient, make_token, make_project):
    for i in range(5):
        await make_project(f"Page {i}")
    raw, _ = await make_token()
    headers = {"X-API-Key": raw}

    first = (await client.get("/api/projects", params={"limit": 3}, headers=headers)).json()
    second = (await client.get(
        "/api/projects", params={"limit": 3, "offset": 3}, headers=headers
    )).json()
    assert len(first["data"]) == 3
    assert len(second["data"]) == 2
    assert second["pagination"] == {"limit": 3, "offset": 3, "total": 5}
    seen = {p["id"] for p in first["data"]} | {p["id"] for p in second["data"]}
    assert len(seen) == 5


@pytest.mark.asyncio
async def test_invalid_pagination_falls_back_to_defaults(client: AsyncClient, make_token, make_project):
    await make_project("Only")
    raw, _ = await make_token()

    resp = await client.get(
        "/api/projects", params={"limit": "abc", "offset": "-4"}, headers={"X-API-Key": raw}
    )
    assert resp.json()["pagination"] == {"limit": 50, "offset": 0, "total": 1}


@pytest.mark.asyncio
async def test_project_allowlist_narrows_list(client: AsyncClient, org, make_token, make_project):
    kept = await make_project("Kept", pole_id=org["pole_a"])
    await make_project("Hidden", pole_id=org["pole_a"])
    raw, _ = await make_token({"project_ids": [str(kept.id)]})

    body = (await client.get("/api/projects", headers={"X-API-Key": raw})).json()
    assert [p["title"] for p in body["data"]] == ["Kept"]
    assert body["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(client: AsyncClient, make_token, make_project):
    await make_project("Refonte du site web")
    await make_project("Nouveau SITE intranet")
    await make_project("Voirie")
    raw, _ = await make_token()

    body = (await client.get(
        "/api/projects", params={"search": "site"}, headers={"X-API-Key": raw}
    )).json()
    assert {p["title"] for p in body["data"]} == {"Refonte du site web", "Nouveau SITE intranet"}


@pytest.mark.asyncio
async def test_equality_filters(client: AsyncClient, org, make_token, make_project):
    await make_project("Followed", suivi_dgs=True, lifecycle_status="study", pole_id=org["pole_a"],
                       direction_id=org["dir_a"])
    await make_project("Not followed", suivi_dgs=False, lifecycle_status="study", pole_id=org["pole_b"],
                       direction_id=org["dir_b"])
    raw, _ = await make_token()
    headers = {"X-API-Key": raw}

    async def titles(**params) -> set[str]:
        resp = await client.get("/api/projects", params=params, headers=headers)
        assert resp.status_code == 200
        return {p["title"] for p in resp.json()["data"]}

    assert await titles(suivi_dgs="true") == {"Followed"}
    assert await titles(suivi_dgs="false") == {"Not followed"}
    assert await titles(lifecycle_status="study") == {"Followed", "Not followed"}
    assert await titles(pole_id=str(org["pole_b"])) == {"Not followed"}
    assert await titles(direction_id=str(org["dir_a"])) == {"Followed"}
    assert await titles(service_id=str(uuid.uuid4())) == set()
    assert await titles(pole_id="garbage") == set()


@pytest.mark.asyncio
async def test_rows_embed_org_unit_names(client: AsyncClient, org, make_token, make_project):
    await make_project("Placed", pole_id=org["pole_a"], direction_id=org["dir_a"])
    raw, _ = await make_token()

    row = (await client.get("/api/projects", headers={"X-API-Key": raw})).json()["data"][0]
    assert row["pole"] == {"name": "Pôle Numérique"}
    assert row["direction"] == {"name": "DSI"}
    assert row["service"] is None
    assert row["suivi_dgs"] is False
