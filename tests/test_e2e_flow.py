"""Full-flow E2E test — the whole role/ownership story through the API.

Learn: Walks the lifecycle using the API alone:
register employee A and manager B → B creates a project and a task for A
→ A moves the task along (ownership) → A can't delete the project (role)
→ an admin can.
"""

import pytest


@pytest.mark.asyncio
async def test_full_lifecycle_via_api(client, register):
    # ── Step 1: Users at each tier ─────────────────────────
    _, user_a, a_headers = await register(role="employee", name="Alice")
    _, user_b, b_headers = await register(role="manager", name="Bob")

    # ── Step 2: Manager creates a project and a task for A ─
    r = await client.post(
        "/api/projects",
        json={"title": "Launch", "description": "Q3 launch"},
        headers=b_headers,
    )
    assert r.status_code == 201
    project_id = r.json()["project"]["id"]

    r = await client.post(
        f"/api/projects/{project_id}/tasks",
        json={"title": "Draft release notes", "assignee_id": user_a["id"]},
        headers=b_headers,
    )
    assert r.status_code == 201
    task_id = r.json()["task"]["id"]

    # ── Step 3: A sees and updates their task ──────────────
    r = await client.get("/api/my/tasks", headers=a_headers)
    assert [t["id"] for t in r.json()["tasks"]] == [task_id]

    r = await client.put(
        f"/api/tasks/{task_id}", json={"status": "in_progress"}, headers=a_headers
    )
    assert r.status_code == 200
    assert r.json()["task"]["status"] == "in_progress"

    # ── Step 4: A can't delete the project ─────────────────
    r = await client.delete(f"/api/projects/{project_id}", headers=a_headers)
    assert r.status_code == 403

    # Neither can the manager
    r = await client.delete(f"/api/projects/{project_id}", headers=b_headers)
    assert r.status_code == 403

    # ── Step 5: Admin deletes it ───────────────────────────
    _, _, admin_headers = await register(role="admin", name="Root")
    r = await client.delete(f"/api/projects/{project_id}", headers=admin_headers)
    assert r.status_code == 200

    r = await client.get(f"/api/projects/{project_id}", headers=a_headers)
    assert r.status_code == 404

    # ── Step 6: Logout is client-side only ─────────────────
    r = await client.post("/api/logout")
    assert r.status_code == 200
