def test_announcement_reaches_everyone(client):
    response = client.post(
        "/api/activities/announcement",
        json={"title": "Maintenance", "description": "Back in five"},
    )
    assert response.status_code == 200
    entry = response.json()
    assert entry["type"] == "core_update"
    assert entry["user_id"] is None

    assert [a["id"] for a in client.get("/api/activities", params={"userId": "anyone"}).json()] == [
        entry["id"]
    ]


def test_mark_read_and_unread_count(client):
    created = client.post(
        "/api/activities",
        json={
            "type": "new_launch",
            "user_id": "bob",
            "title": "Token launched",
            "description": "BobGOON is live",
        },
    ).json()
    assert client.get("/api/activities/unread-count", params={"userId": "bob"}).json() == {
        "count": 1
    }

    marked = client.put(f"/api/activities/{created['id']}/read").json()
    assert marked["is_read"] is True
    assert client.get("/api/activities/unread-count", params={"userId": "bob"}).json() == {
        "count": 0
    }


def test_mark_read_missing(client):
    response = client.put("/api/activities/missing/read")
    assert response.status_code == 404
    assert response.json() == {"error": "Activity not found"}


def test_unread_count_requires_user(client):
    response = client.get("/api/activities/unread-count")
    assert response.status_code == 400
    assert response.json() == {"error": "userId is required"}
