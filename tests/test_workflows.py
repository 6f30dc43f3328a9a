"""End-to-end flows across auth, tasks, users and stats."""


def test_sprint_workflow(client, register_user):
    """A member logs work, an admin reviews it and removes the member."""
    admin = register_user("lead", "leadpass", isAdmin=True)
    alice = register_user("alice", "alicepass", skills="python")

    # Alice logs in and creates a task
    response = client.post("/api/auth/login", json={"username": "alice", "password": "alicepass"})
    assert response.status_code == 200
    alice_token = {"Authorization": f"Bearer {response.json()['token']}"}

    response = client.post(
        "/api/tasks", headers=alice_token, json={"title": "Fix import bug", "totalMinutes": 0}
    )
    task_id = response.json()["id"]

    # Work happens: status moves and minutes are logged
    client.patch(f"/api/tasks/{task_id}/status", headers=alice_token, json={"status": "in_progress"})
    client.patch(f"/api/tasks/{task_id}", headers=alice_token, json={"totalMinutes": 90})
    response = client.patch(
        f"/api/tasks/{task_id}/status", headers=alice_token, json={"status": "done"}
    )
    assert response.json()["status"] == "done"
    assert response.json()["totalMinutes"] == 90

    # The admin sees it in the stats
    response = client.get("/api/stats/top-users", headers=admin)
    leader = response.json()["topUsers"][0]
    assert leader["userId"] == alice.user_id
    assert leader["totalHours"] == 1.5
    assert leader["completionRate"] == 100

    response = client.get("/api/stats/platform", headers=admin)
    assert response.json()["tasks"]["completedTasks"] == 1

    # The admin removes Alice, taking her tasks with her
    response = client.delete(f"/api/users/{alice.user_id}", headers=admin)
    assert response.status_code == 200
    response = client.get("/api/tasks", headers=admin)
    assert response.json() == []

    response = client.get("/api/auth/verify", headers=alice_token)
    assert response.status_code == 401
    assert response.json() == {"error": "User not found"}


def test_members_never_see_each_others_work(client, register_user):
    ann = register_user("ann")
    ben = register_user("ben")

    ann_task = client.post("/api/tasks", headers=ann, json={"title": "Ann's"}).json()
    client.post("/api/tasks", headers=ben, json={"title": "Ben's"})

    assert [t["title"] for t in client.get("/api/tasks", headers=ann).json()] == ["Ann's"]
    assert [t["title"] for t in client.get("/api/tasks", headers=ben).json()] == ["Ben's"]
    assert client.get(f"/api/tasks/{ann_task['id']}", headers=ben).status_code == 403


def test_register_login_create_and_foreign_delete(client):
    """Register, log in, create, move status, then a stranger fails to delete."""
    assert (
        client.post("/api/auth/register", json={"username": "u1", "password": "pw1"}).status_code
        == 201
    )
    login = client.post("/api/auth/login", json={"username": "u1", "password": "pw1"})
    headers = {"Authorization": f"Bearer {login.json()['token']}"}

    assert client.get("/api/tasks", headers=headers).json() == []

    task = client.post("/api/tasks", headers=headers, json={"title": "First"}).json()
    response = client.patch(
        f"/api/tasks/{task['id']}/status", headers=headers, json={"status": "in_progress"}
    )
    assert response.json()["status"] == "in_progress"

    stranger = client.post("/api/auth/register", json={"username": "u2", "password": "pw2"})
    stranger_headers = {"Authorization": f"Bearer {stranger.json()['token']}"}
    response = client.delete(f"/api/tasks/{task['id']}", headers=stranger_headers)
    assert response.status_code == 403

    assert len(client.get("/api/tasks", headers=headers).json()) == 1
