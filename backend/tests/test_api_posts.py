from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from services.solana import SolanaClient

from conftest import FAN_WALLET


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_importing_main_builds_no_app():
    import main

    assert not hasattr(main, "app")


def test_each_app_gets_its_own_storage():
    first = create_app(settings=Settings())
    second = create_app(settings=Settings())
    assert first.state.storage is not second.state.storage


def test_locked_post_serves_preview(client, paid_post, fan):
    anonymous = client.get(f"/api/posts/{paid_post.id}").json()
    assert anonymous["locked"] is True
    assert anonymous["media_url"] == paid_post.thumb_url
    assert anonymous["creator"]["handle"] == "sarah_creates"

    as_creator = client.get(
        f"/api/posts/{paid_post.id}", params={"userId": paid_post.creator_id}
    ).json()
    assert as_creator["locked"] is False
    assert as_creator["media_url"] == paid_post.media_url


def test_unlock_flow(client, mem_storage, paid_post, fan):
    body = {"postId": paid_post.id, "userPubkey": FAN_WALLET}

    first = client.post("/api/posts/unlock", json=body)
    assert first.status_code == 200
    assert first.json() == {"success": True}

    second = client.post("/api/posts/unlock", json=body)
    assert second.status_code == 200
    assert second.json() == {"success": True, "message": "Already unlocked"}
    assert list(mem_storage.purchases) == [(FAN_WALLET, paid_post.id)]

    unlocked = client.get(f"/api/posts/{paid_post.id}", params={"userId": FAN_WALLET}).json()
    assert unlocked["locked"] is False
    assert unlocked["media_url"] == paid_post.media_url


def test_unlock_missing_post(client):
    response = client.post(
        "/api/posts/unlock", json={"postId": "missing", "userPubkey": FAN_WALLET}
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Post not found"}


def test_unlock_requires_payment_when_verification_is_on(mem_storage, ai_client, paid_post):
    app = create_app(
        settings=Settings(verify_payments=True),
        storage=mem_storage,
        ai_client=ai_client,
        solana_client=SolanaClient("http://solana.invalid"),
    )
    with TestClient(app) as client:
        response = client.post(
            "/api/posts/unlock", json={"postId": paid_post.id, "userPubkey": FAN_WALLET}
        )
    assert response.status_code == 402
    assert "error" in response.json()


def test_feed_pagination(client, creator, paid_post):
    response = client.get("/api/feed", params={"limit": 1})
    assert response.status_code == 200
    data = response.json()
    assert len(data["posts"]) == 1
    assert data["pagination"] == {"limit": 1, "offset": 0, "total": 1, "hasMore": False}
    assert data["posts"][0]["locked"] is True


def test_like_unlike_round(client, paid_post):
    url = f"/api/posts/{paid_post.id}/like"

    assert client.post(url, json={"userId": FAN_WALLET}).json() == {"success": True}
    assert client.get(url, params={"userId": FAN_WALLET}).json() == {"isLiked": True}
    assert client.get(f"/api/posts/{paid_post.id}").json()["likes"] == 1

    assert client.request("DELETE", url, json={"userId": FAN_WALLET}).status_code == 200
    missing = client.request("DELETE", url, json={"userId": FAN_WALLET})
    assert missing.status_code == 404
    assert missing.json() == {"error": "Like not found"}
    assert client.get(f"/api/posts/{paid_post.id}").json()["likes"] == 0


def test_like_status_requires_user(client, paid_post):
    response = client.get(f"/api/posts/{paid_post.id}/like")
    assert response.status_code == 400
    assert response.json() == {"error": "User ID is required"}


def test_track_view(client, paid_post):
    assert client.post(f"/api/posts/{paid_post.id}/view").json() == {"success": True, "views": 1}
    assert client.post("/api/posts/missing/view").status_code == 404


def test_create_post_notifies_followers(client, mem_storage, creator, fan):
    client.post("/api/profile/follow", json={"followerId": fan.id, "followingId": creator.id})

    response = client.post(
        "/api/posts",
        json={
            "creator_id": creator.id,
            "media_url": "https://cdn.example.com/new.jpg",
            "thumb_url": "https://cdn.example.com/new_thumb.jpg",
            "caption": "fresh upload",
        },
    )
    assert response.status_code == 200
    post_id = response.json()["id"]

    feed = client.get("/api/activities", params={"userId": fan.id}).json()
    assert [a["type"] for a in feed] == ["content_update"]
    assert feed[0]["post_id"] == post_id


def test_create_post_rejected_by_moderation(client, creator):
    response = client.post(
        "/api/posts",
        json={
            "creator_id": creator.id,
            "media_url": "https://cdn.example.com/new.jpg",
            "thumb_url": "https://cdn.example.com/new_thumb.jpg",
            "caption": "something forbidden",
        },
    )
    assert response.status_code == 400
    assert response.json() == {
        "error": "Content rejected by moderation",
        "details": "Contains forbidden content",
    }


def test_invalid_body_uses_error_shape(client):
    response = client.post("/api/posts", json={"caption": "no media"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request data"
    assert "media_url" in body["details"]


def test_my_posts_include_drafts(client, creator):
    client.post(
        "/api/posts",
        json={
            "creator_id": creator.id,
            "media_url": "https://cdn.example.com/d.jpg",
            "thumb_url": "https://cdn.example.com/d_t.jpg",
            "status": "draft",
        },
    )
    assert client.get("/api/feed").json()["posts"] == []
    mine = client.get("/api/posts/my", params={"creatorId": creator.id}).json()
    assert [p["status"] for p in mine] == ["draft"]


def test_content_analytics(client, creator, paid_post):
    client.post(f"/api/posts/{paid_post.id}/view")
    client.post(f"/api/posts/{paid_post.id}/view")
    client.post(f"/api/posts/{paid_post.id}/like", json={"userId": FAN_WALLET})

    data = client.get("/api/analytics/content", params={"creatorId": creator.id}).json()
    assert data["totalViews"] == 2
    assert data["totalLikes"] == 1
    assert data["totalPosts"] == 1
    assert data["engagementRate"] == 50.0
    assert data["topPost"]["id"] == paid_post.id
