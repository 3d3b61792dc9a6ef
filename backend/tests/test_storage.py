"""
Behavior shared by the in-memory and SQL backends
"""

import pytest

from enums import ActivityType, ChatRole, MediaType, PostSort, PostStatus, StreamStatus
from models.schemas import (
    LiveStreamUpdate,
    NewActivity,
    NewAiPersona,
    NewChatMessage,
    NewLiveChatMessage,
    NewLiveStream,
    NewPost,
    NewPurchase,
    NewTip,
    NewToken,
    NewUser,
    PostFilters,
    PostUpdate,
    UserUpdate,
)
from storage import DuplicateRecordError


async def _user(storage, user_id, **fields):
    return await storage.create_user(NewUser(id=user_id, **fields))


async def _post(storage, creator_id="creator", **fields):
    values = {
        "creator_id": creator_id,
        "media_url": "https://cdn.example.com/a.jpg",
        "thumb_url": "https://cdn.example.com/a_thumb.jpg",
    }
    values.update(fields)
    return await storage.create_post(NewPost(**values))


async def test_user_crud(storage):
    user = await _user(storage, "wallet1", goon_username="alice", handle="alice_h", bio="hi")
    assert user.created_at is not None

    assert (await storage.get_user("wallet1")).goon_username == "alice"
    assert (await storage.get_user_by_handle("alice_h")).id == "wallet1"
    assert (await storage.get_user_by_goon_username("alice")).id == "wallet1"
    assert await storage.get_user("missing") is None

    updated = await storage.update_user("wallet1", UserUpdate(bio="updated"))
    assert updated.bio == "updated"
    assert updated.handle == "alice_h"
    assert await storage.update_user("missing", UserUpdate(bio="x")) is None

    touched = await storage.update_user_last_active("wallet1")
    assert touched.last_active is not None


async def test_duplicate_user_rejected(storage):
    await _user(storage, "wallet1")
    with pytest.raises(DuplicateRecordError):
        await _user(storage, "wallet1")


async def test_update_solana_address(storage):
    await _user(storage, "wallet1")
    user = await storage.update_user_solana_address("wallet1", "So11111111111111111111111111111111111111112")
    assert user.solana_address == "So11111111111111111111111111111111111111112"


async def test_search_users_is_case_insensitive(storage):
    await _user(storage, "w1", goon_username="SarahCreates")
    await _user(storage, "w2", handle="bob")
    results = await storage.search_users("sarah", 10)
    assert [u.id for u in results] == ["w1"]


async def test_posts_filters_and_sorting(storage):
    await _user(storage, "creator")
    photo = await _post(storage, tags=["Fitness"], caption="morning workout")
    video = await _post(storage, media_url="https://cdn.example.com/clip.MP4", tags=["travel"])
    await _post(storage, status=PostStatus.DRAFT)

    published = await storage.get_posts()
    assert {p.id for p in published} == {photo.id, video.id}

    by_category = await storage.get_posts(PostFilters(category="fitness"))
    assert [p.id for p in by_category] == [photo.id]

    videos = await storage.get_posts(PostFilters(media_type=MediaType.VIDEO))
    assert [p.id for p in videos] == [video.id]

    everything = await storage.get_posts(
        PostFilters(creator_id="creator", include_unpublished=True)
    )
    assert len(everything) == 3

    await storage.increment_post_views(video.id)
    trending = await storage.get_posts(PostFilters(sort=PostSort.TRENDING))
    assert trending[0].id == video.id


async def test_update_post(storage):
    post = await _post(storage, caption="before")
    updated = await storage.update_post(post.id, PostUpdate(caption="after", tags=["new"]))
    assert updated.caption == "after"
    assert updated.tags == ["new"]
    assert await storage.update_post("missing", PostUpdate(caption="x")) is None


async def test_increment_views(storage):
    post = await _post(storage)
    await storage.increment_post_views(post.id)
    again = await storage.increment_post_views(post.id)
    assert again.views == 2
    assert await storage.increment_post_views("missing") is None


async def test_like_unlike_symmetry(storage):
    post = await _post(storage)

    assert await storage.like_post(post.id, "fan") is True
    assert await storage.like_post(post.id, "fan") is True
    assert (await storage.get_post(post.id)).likes == 1
    assert await storage.is_post_liked(post.id, "fan") is True

    assert await storage.unlike_post(post.id, "fan") is True
    assert (await storage.get_post(post.id)).likes == 0
    assert await storage.is_post_liked(post.id, "fan") is False

    # No edge left: unlike is a no-op and the counter never goes negative
    assert await storage.unlike_post(post.id, "fan") is False
    assert (await storage.get_post(post.id)).likes == 0


async def test_like_missing_post(storage):
    assert await storage.like_post("missing", "fan") is False


async def test_search_posts_matches_caption_and_tags(storage):
    by_caption = await _post(storage, caption="Sunset at the Beach")
    by_tag = await _post(storage, tags=["beachlife"])
    await _post(storage, caption="mountains")
    results = await storage.search_posts("beach", 10)
    assert {p.id for p in results} == {by_caption.id, by_tag.id}


async def test_wildcards_in_search_text_match_literally(storage):
    await _user(storage, "w1", handle="a_b")
    await _user(storage, "w2", handle="axb")
    assert [u.id for u in await storage.search_users("a_b", 10)] == ["w1"]

    discount = await _post(storage, caption="50% off this week")
    await _post(storage, caption="500 off this week")
    assert [p.id for p in await storage.search_posts("50%", 10)] == [discount.id]

    await storage.create_token(
        NewToken(
            creator_id="creator",
            mint_address="2BxkGHtRjyZp3Q7vL8sM9XN4JeRaKjWzDxYpGqNvgoon",
            name="SarahGOON",
            symbol="goon",
            supply=1_000_000,
        )
    )
    assert await storage.search_tokens("s%h", 5) == []


async def test_category_filter_is_an_exact_tag_match(storage):
    await _user(storage, "creator")
    tagged = await _post(storage, tags=["bts", "café"])

    assert await storage.get_posts(PostFilters(category="b_s")) == []
    assert await storage.get_posts(PostFilters(category="%")) == []
    assert [p.id for p in await storage.get_posts(PostFilters(category="BTS"))] == [tagged.id]
    assert [p.id for p in await storage.get_posts(PostFilters(category="café"))] == [tagged.id]


async def test_tokens(storage):
    token = await storage.create_token(
        NewToken(
            creator_id="creator",
            mint_address="2BxkGHtRjyZp3Q7vL8sM9XN4JeRaKjWzDxYpGqNvgoon",
            name="SarahGOON",
            symbol="goon",
            supply=1_000_000,
        )
    )
    assert token.symbol == "GOON"
    assert (await storage.get_token(token.id)).name == "SarahGOON"
    assert [t.id for t in await storage.get_tokens("creator")] == [token.id]
    assert await storage.get_tokens("someone-else") == []
    assert [t.id for t in await storage.search_tokens("sarah", 5)] == [token.id]


async def test_purchases(storage):
    post = await _post(storage, price_lamports=100)
    assert await storage.has_purchased("fan", post.id) is False

    await storage.create_purchase(
        NewPurchase(user_id="fan", post_id=post.id, amount_lamports=100, txn_sig="sig1")
    )
    assert await storage.has_purchased("fan", post.id) is True
    assert await storage.has_purchased("other", post.id) is False

    with pytest.raises(DuplicateRecordError):
        await storage.create_purchase(
            NewPurchase(user_id="fan", post_id=post.id, amount_lamports=100, txn_sig="sig2")
        )

    purchases = await storage.get_purchases(user_id="fan")
    assert [p.post_id for p in purchases] == [post.id]
    assert await storage.get_purchases(user_id="fan", post_ids=["other"]) == []


async def test_tips(storage):
    await storage.create_tip(
        NewTip(from_user="fan", to_user="creator", amount_lamports=10, txn_sig="a")
    )
    await storage.create_tip(
        NewTip(from_user="creator", to_user="someone", amount_lamports=20, txn_sig="b")
    )
    assert len(await storage.get_tips("creator")) == 2
    assert len(await storage.get_tips("fan")) == 1


async def test_persona_upsert_replaces(storage):
    await storage.upsert_persona(NewAiPersona(creator_id="creator", system_prompt="first"))
    persona = await storage.upsert_persona(
        NewAiPersona(creator_id="creator", system_prompt="second", price_per_message=5)
    )
    assert persona.system_prompt == "second"
    stored = await storage.get_persona("creator")
    assert stored.system_prompt == "second"
    assert stored.price_per_message == 5


async def test_chat_messages_are_scoped_to_the_pair(storage):
    await storage.create_chat_message(
        NewChatMessage(user_id="fan", creator_id="creator", role=ChatRole.USER, content="hi")
    )
    await storage.create_chat_message(
        NewChatMessage(user_id="other", creator_id="creator", role=ChatRole.USER, content="yo")
    )
    messages = await storage.get_chat_messages("fan", "creator")
    assert [m.content for m in messages] == ["hi"]


async def test_follow_is_idempotent(storage):
    await _user(storage, "a")
    await _user(storage, "b")

    first = await storage.follow_user("a", "b")
    second = await storage.follow_user("a", "b")
    assert first.id == second.id
    assert await storage.get_follower_count("b") == 1
    assert await storage.get_following_count("a") == 1
    assert await storage.is_following("a", "b") is True
    assert await storage.is_following("b", "a") is False

    assert [u.id for u in await storage.get_followers("b")] == ["a"]
    assert [u.id for u in await storage.get_following("a")] == ["b"]
    assert await storage.get_follower_ids("b") == ["a"]

    assert await storage.unfollow_user("a", "b") is True
    assert await storage.unfollow_user("a", "b") is False
    assert await storage.get_follower_count("b") == 0


async def test_activity_visibility_and_read_state(storage):
    global_entry = await storage.create_activity(
        NewActivity(type=ActivityType.CORE_UPDATE, title="Launch", description="v2 is live")
    )
    owned = await storage.create_activity(
        NewActivity(
            type=ActivityType.NEW_FOLLOWER,
            user_id="bob",
            title="New follower",
            description="alice followed you",
            metadata={"follower_id": "alice"},
        )
    )
    await storage.create_activity(
        NewActivity(
            type=ActivityType.NEW_FOLLOWER, user_id="carol", title="x", description="private"
        )
    )

    bob_feed = await storage.get_activities("bob")
    assert {a.id for a in bob_feed} == {global_entry.id, owned.id}
    assert [a.id for a in await storage.get_activities()] == [global_entry.id]
    assert next(a for a in bob_feed if a.id == owned.id).metadata == {"follower_id": "alice"}

    assert await storage.get_unread_activity_count("bob") == 2
    marked = await storage.mark_activity_as_read(owned.id)
    assert marked.is_read is True
    assert await storage.get_unread_activity_count("bob") == 1
    assert await storage.mark_activity_as_read("missing") is None


async def test_create_activities_batch(storage):
    created = await storage.create_activities(
        [
            NewActivity(type=ActivityType.CONTENT_UPDATE, user_id=f"f{i}", title="t", description="d")
            for i in range(3)
        ]
    )
    assert len(created) == 3
    assert len({a.id for a in created}) == 3


async def test_max_viewers_is_a_running_maximum(storage):
    stream = await storage.create_live_stream(
        NewLiveStream(creator_id="creator", title="Live", stream_key="key")
    )
    for count in [5, 20, 3, 30, 1]:
        updated = await storage.update_stream_viewer_count(stream.id, count)
    assert updated.viewer_count == 1
    assert updated.max_viewers == 30
    assert await storage.update_stream_viewer_count("missing", 3) is None


async def test_stream_lifecycle(storage):
    stream = await storage.create_live_stream(
        NewLiveStream(
            creator_id="creator", title="Live", stream_key="key", metadata={"is_muted": False}
        )
    )
    assert stream.status == StreamStatus.LIVE
    assert stream.metadata == {"is_muted": False}
    assert [s.id for s in await storage.get_active_streams()] == [stream.id]

    updated = await storage.update_live_stream(stream.id, LiveStreamUpdate(title="Renamed"))
    assert updated.title == "Renamed"

    ended = await storage.end_live_stream(stream.id)
    assert ended.status == StreamStatus.ENDED
    assert ended.ended_at is not None
    assert await storage.get_active_streams() == []
    assert [s.id for s in await storage.get_live_streams(status="ended")] == [stream.id]
    assert await storage.get_live_streams(creator_id="nobody") == []


async def test_live_chat_pagination(storage):
    stream = await storage.create_live_stream(
        NewLiveStream(creator_id="creator", title="Live", stream_key="key")
    )
    for i in range(5):
        await storage.create_live_chat_message(
            NewLiveChatMessage(stream_id=stream.id, user_id="fan", message=f"m{i}")
        )
    page = await storage.get_live_chat_messages(stream.id, limit=2, offset=1)
    assert len(page) == 2
    assert await storage.get_live_chat_messages("other", limit=10, offset=0) == []


async def test_search_all(storage):
    await _user(storage, "w1", goon_username="goonmaster")
    await _post(storage, caption="goon night")
    results = await storage.search_all("goon", 10)
    assert [u.id for u in results.users] == ["w1"]
    assert len(results.posts) == 1
    assert results.tokens == []
