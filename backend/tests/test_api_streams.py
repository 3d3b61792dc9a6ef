from conftest import CREATOR_WALLET, FAN_WALLET


def _go_live(client, **fields):
    body = {"creator_id": CREATOR_WALLET, "title": "Studio session"}
    body.update(fields)
    response = client.post("/api/streams", json=body)
    assert response.status_code == 200
    return response.json()


def test_go_live_defaults(client):
    stream = _go_live(client)
    assert stream["status"] == "live"
    assert stream["stream_key"].startswith("stream_")
    assert stream["metadata"]["is_muted"] is False
    assert stream["metadata"]["is_camera_on"] is True
    assert "start_time" in stream["metadata"]


def test_active_route_is_not_shadowed(client):
    stream = _go_live(client)
    active = client.get("/api/streams/active").json()
    assert [s["id"] for s in active] == [stream["id"]]


def test_viewer_watermark(client):
    stream = _go_live(client)
    for count in [5, 20, 3, 30, 1]:
        response = client.put(
            f"/api/streams/{stream['id']}/viewers", json={"viewerCount": count}
        )
    data = response.json()
    assert data["viewer_count"] == 1
    assert data["max_viewers"] == 30


def test_negative_viewer_count_rejected(client):
    stream = _go_live(client)
    response = client.put(f"/api/streams/{stream['id']}/viewers", json={"viewerCount": -1})
    assert response.status_code == 400


def test_end_stream(client):
    stream = _go_live(client)
    ended = client.put(f"/api/streams/{stream['id']}/end").json()
    assert ended["status"] == "ended"
    assert ended["ended_at"] is not None
    assert client.get("/api/streams/active").json() == []

    listing = client.get("/api/streams", params={"status": "ended"}).json()
    assert [s["id"] for s in listing["streams"]] == [stream["id"]]
    assert listing["pagination"]["total"] == 1


def test_update_stream(client):
    stream = _go_live(client)
    updated = client.put(f"/api/streams/{stream['id']}", json={"title": "Q&A"}).json()
    assert updated["title"] == "Q&A"


def test_missing_stream(client):
    for response in (
        client.get("/api/streams/missing"),
        client.put("/api/streams/missing/end"),
        client.put("/api/streams/missing/viewers", json={"viewerCount": 1}),
        client.post("/api/chat/live/missing", json={"userId": FAN_WALLET, "message": "hi"}),
    ):
        assert response.status_code == 404
        assert response.json() == {"error": "Stream not found"}


def test_live_chat(client, fan):
    stream = _go_live(client)
    url = f"/api/chat/live/{stream['id']}"
    for i in range(3):
        sent = client.post(url, json={"userId": FAN_WALLET, "message": f"hello {i}"})
        assert sent.status_code == 200
    assert sent.json()["user"]["id"] == FAN_WALLET

    page = client.get(url, params={"limit": 2}).json()
    assert len(page["messages"]) == 2
    assert page["pagination"]["hasMore"] is True
    assert "total" not in page["pagination"] or page["pagination"]["total"] is None
