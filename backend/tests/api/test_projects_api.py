import uuid

import pytest


@pytest.mark.asyncio
async def test_projects_require_authentication(async_client):
    listing = await async_client.get("/api/projects")
    creation = await async_client.post(
        "/api/projects", json={"name": "x", "description": "y", "key": "XY"}
    )

    assert listing.status_code == 401
    assert creation.status_code == 401


@pytest.mark.asyncio
async def test_create_project_uppercases_key(register_user, create_project):
    owner = await register_user("owner")

    project = await create_project(
        owner["token"], key=" web ", bug_types=[{"name": "Crash", "description": "App dies"}]
    )

    assert project["key"] == "WEB"
    assert project["status"] == "active"
    assert project["creator"]["id"] == owner["user"]["id"]
    assert project["team_members"] == []
    assert project["bug_types"] == [
        {"name": "Crash", "description": "App dies", "color": "#6B7280"}
    ]


@pytest.mark.asyncio
async def test_project_key_must_be_unique(async_client, register_user, create_project, auth_headers):
    owner = await register_user("owner")
    await create_project(owner["token"], key="DUP")

    response = await async_client.post(
        "/api/projects",
        json={"name": "Again", "description": "d", "key": "dup"},
        headers=auth_headers(owner["token"]),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Project key already exists"


@pytest.mark.asyncio
async def test_project_validation(async_client, register_user, auth_headers):
    owner = await register_user("owner")

    response = await async_client.post(
        "/api/projects",
        json={"name": "", "description": "d", "key": "1-bad"},
        headers=auth_headers(owner["token"]),
    )
    unknown_member = await async_client.post(
        "/api/projects",
        json={"name": "n", "description": "d", "key": "MEM", "team_members": [str(uuid.uuid4())]},
        headers=auth_headers(owner["token"]),
    )

    assert response.status_code == 400
    fields = {error.split(":")[0] for error in response.json()["errors"]}
    assert {"name", "key"} <= fields
    assert unknown_member.status_code == 400
    assert unknown_member.json()["detail"].startswith("Unknown team members")


@pytest.mark.asyncio
async def test_list_projects_shows_owned_and_member_projects_with_counts(
    async_client, register_user, create_project, auth_headers
):
    owner = await register_user("owner")
    member = await register_user("member")
    outsider = await register_user("outsider")
    shared = await create_project(owner["token"], key="SHARED", team_members=[member["user"]["id"]])
    await create_project(owner["token"], key="PRIVATE")
    archived = await create_project(member["token"], key="OLD")
    await async_client.put(
        f"/api/projects/{archived['id']}",
        json={"status": "archived"},
        headers=auth_headers(member["token"]),
    )

    for status in ("open", "in-progress", "closed"):
        await async_client.post(
            "/api/bugs",
            json={"title": "b", "description": "d", "status": status, "project_id": shared["id"]},
        )

    owner_list = (await async_client.get("/api/projects", headers=auth_headers(owner["token"]))).json()
    member_list = (await async_client.get("/api/projects", headers=auth_headers(member["token"]))).json()
    outsider_list = (
        await async_client.get("/api/projects", headers=auth_headers(outsider["token"]))
    ).json()

    assert sorted(p["key"] for p in owner_list) == ["PRIVATE", "SHARED"]
    assert [p["key"] for p in member_list] == ["SHARED"]
    assert outsider_list == []
    shared_entry = member_list[0]
    assert shared_entry["bug_count"] == 3
    assert shared_entry["open_bug_count"] == 2
    assert shared_entry["team_members"][0]["username"] == "member"


@pytest.mark.asyncio
async def test_read_project_access_rules(async_client, register_user, create_project, auth_headers):
    owner = await register_user("owner")
    member = await register_user("member")
    outsider = await register_user("outsider")
    project = await create_project(owner["token"], key="READ", team_members=[member["user"]["id"]])
    await async_client.post(
        "/api/bugs", json={"title": "b", "description": "d", "project_id": project["id"]}
    )
    url = f"/api/projects/{project['id']}"

    as_owner = await async_client.get(url, headers=auth_headers(owner["token"]))
    as_member = await async_client.get(url, headers=auth_headers(member["token"]))
    as_outsider = await async_client.get(url, headers=auth_headers(outsider["token"]))
    unknown = await async_client.get(
        f"/api/projects/{uuid.uuid4()}", headers=auth_headers(owner["token"])
    )
    malformed = await async_client.get("/api/projects/undefined", headers=auth_headers(owner["token"]))

    assert as_owner.status_code == 200
    assert as_owner.json()["bug_stats"] == {"open": 1}
    assert as_owner.json()["total_bugs"] == 1
    assert as_member.status_code == 200
    assert as_outsider.status_code == 403
    assert as_outsider.json()["detail"] == "Access denied"
    assert unknown.status_code == 404
    assert malformed.status_code == 400


@pytest.mark.asyncio
async def test_only_owner_can_update(async_client, register_user, create_project, auth_headers):
    owner = await register_user("owner")
    member = await register_user("member")
    project = await create_project(owner["token"], key="UPD", team_members=[member["user"]["id"]])
    url = f"/api/projects/{project['id']}"

    by_member = await async_client.put(
        url, json={"name": "Hijacked"}, headers=auth_headers(member["token"])
    )
    by_owner = await async_client.put(
        url,
        json={
            "name": "Renamed",
            "team_members": [],
            "bug_types": [{"name": "Regression", "color": "#FF0000"}],
            "status": "completed",
        },
        headers=auth_headers(owner["token"]),
    )

    assert by_member.status_code == 403
    assert by_owner.status_code == 200
    body = by_owner.json()
    assert body["name"] == "Renamed"
    assert body["key"] == "UPD"
    assert body["team_members"] == []
    assert body["bug_types"][0]["name"] == "Regression"
    assert body["status"] == "completed"


@pytest.mark.asyncio
async def test_delete_project_cascades_to_bugs(
    async_client, register_user, create_project, auth_headers
):
    owner = await register_user("owner")
    member = await register_user("member")
    project = await create_project(owner["token"], key="GONE", team_members=[member["user"]["id"]])
    bug = (
        await async_client.post(
            "/api/bugs", json={"title": "b", "description": "d", "project_id": project["id"]}
        )
    ).json()
    unrelated = (await async_client.post("/api/bugs", json={"title": "u", "description": "d"})).json()
    url = f"/api/projects/{project['id']}"

    by_member = await async_client.delete(url, headers=auth_headers(member["token"]))
    by_owner = await async_client.delete(url, headers=auth_headers(owner["token"]))

    assert by_member.status_code == 403
    assert by_owner.status_code == 200
    assert by_owner.json() == {"message": "Project and associated bugs deleted successfully"}
    assert (await async_client.get(url, headers=auth_headers(owner["token"]))).status_code == 404
    assert (await async_client.get(f"/api/bugs/{bug['id']}")).status_code == 404
    assert (await async_client.get(f"/api/bugs/{unrelated['id']}")).status_code == 200
