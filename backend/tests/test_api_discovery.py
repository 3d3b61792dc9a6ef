from models.schemas import NewPost, NewToken, NewUser

from conftest import FAN_WALLET


async def _seed(mem_storage):
    creator = await mem_storage.create_user(
        NewUser(id="creator", goon_username="beachbabe", handle="beach_h", bio="Sun and sand")
    )
    post = await mem_storage.create_post(
        NewPost(
            creator_id=creator.id,
            media_url="https://cdn.example.com/beach.mp4",
            thumb_url="https://cdn.example.com/beach.jpg",
            caption="A long day at the beach with friends, sunsets and more than fifty characters",
            tags=["beach", "live"],
            price_lamports=10,
        )
    )
    await mem_storage.create_token(
        NewToken(
            creator_id=creator.id,
            mint_address="2BxkGHtRjyZp3Q7vL8sM9XN4JeRaKjWzDxYpGqNvgoon",
            name="BeachGOON",
            symbol="GOON",
            supply=100,
        )
    )
    return creator, post


def test_search_requires_query(client):
    response = client.get("/api/search")
    assert response.status_code == 400
    assert response.json() == {"error": "Search query is required"}


async def test_search_all_types(client, mem_storage):
    creator, post = await _seed(mem_storage)
    data = client.get("/api/search", params={"q": "beach"}).json()
    assert [u["id"] for u in data["users"]] == [creator.id]
    assert [p["id"] for p in data["posts"]] == [post.id]
    assert [t["name"] for t in data["tokens"]] == ["BeachGOON"]
    assert data["posts"][0]["locked"] is True
    assert data["pagination"]["total"] == 3


async def test_search_single_type(client, mem_storage):
    await _seed(mem_storage)
    data = client.get("/api/search", params={"q": "beach", "type": "users"}).json()
    assert len(data["users"]) == 1
    assert data["posts"] == []
    assert data["tokens"] == []


async def test_suggestions(client, mem_storage):
    creator, post = await _seed(mem_storage)
    assert client.get("/api/search/suggestions", params={"q": "b"}).json() == {"suggestions": []}

    suggestions = client.get("/api/search/suggestions", params={"q": "beach"}).json()["suggestions"]
    by_type = {s["type"]: s for s in suggestions}
    assert by_type["user"]["title"] == "beachbabe"
    assert by_type["user"]["subtitle"] == "Sun and sand"
    assert by_type["post"]["title"] == post.caption[:50] + "..."
    assert by_type["post"]["subtitle"] == "beach, live"
    assert by_type["post"]["thumbnail"] == post.thumb_url


async def test_trending_live_and_videos(client, mem_storage):
    _, post = await _seed(mem_storage)
    await mem_storage.create_post(
        NewPost(creator_id="creator", media_url="https://x/p.png", thumb_url="https://x/t.png")
    )

    live = client.get("/api/trending", params={"type": "live"}).json()
    assert [p["id"] for p in live["posts"]] == [post.id]
    assert live["timeframe"] == "24h"

    videos = client.get("/api/trending", params={"type": "videos"}).json()
    assert [p["id"] for p in videos["posts"]] == [post.id]

    everything = client.get("/api/trending", params={"userId": FAN_WALLET}).json()
    assert everything["total"] == 2


async def test_discover_mixes_posts_and_streams(client, mem_storage):
    await _seed(mem_storage)
    client.post("/api/streams", json={"creator_id": "creator", "title": "Live now"})

    data = client.get("/api/discover").json()
    # The same post is both trending and recent
    assert len(data["content"]) == 3
    assert data["pagination"]["total"] == 3
    assert all(item["creator"]["id"] == "creator" for item in data["content"])
