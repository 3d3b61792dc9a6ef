from models.schemas import NewAiPersona

from conftest import FAN_WALLET


async def _persona(mem_storage, creator, **fields):
    return await mem_storage.upsert_persona(
        NewAiPersona(creator_id=creator.id, system_prompt="You are Sarah.", **fields)
    )


async def test_chat_send_by_handle_keeps_order(client, mem_storage, creator, ai_client):
    await _persona(mem_storage, creator)

    for content in ("first", "second"):
        response = client.post(
            "/api/chat/send",
            json={"creatorId": "sarah_creates", "content": content, "userPubkey": FAN_WALLET},
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "response": f"reply to: {content}"}

    messages = client.get(
        "/api/chat/messages/sarah_creates", params={"userId": FAN_WALLET}
    ).json()
    assert [(m["role"], m["content"]) for m in messages] == [
        ("user", "first"),
        ("assistant", "reply to: first"),
        ("user", "second"),
        ("assistant", "reply to: second"),
    ]
    assert all(m["creator_id"] == creator.id for m in messages)
    assert ai_client.calls[0] == ("first", "You are Sarah.")


async def test_chat_send_by_creator_id(client, mem_storage, creator):
    await _persona(mem_storage, creator)
    response = client.post(
        "/api/chat/send",
        json={"creatorId": creator.id, "content": "hey", "userPubkey": FAN_WALLET},
    )
    assert response.status_code == 200


def test_chat_without_persona(client, creator):
    response = client.post(
        "/api/chat/send",
        json={"creatorId": "sarah_creates", "content": "hi", "userPubkey": FAN_WALLET},
    )
    assert response.status_code == 404
    assert response.json() == {"error": "AI persona not available"}


async def test_inactive_persona_is_unavailable(client, mem_storage, creator):
    await _persona(mem_storage, creator, is_active=False)
    response = client.post(
        "/api/chat/send",
        json={"creatorId": "sarah_creates", "content": "hi", "userPubkey": FAN_WALLET},
    )
    assert response.status_code == 404


def test_messages_require_user(client, creator):
    response = client.get("/api/chat/messages/sarah_creates")
    assert response.status_code == 400
    assert response.json() == {"error": "User ID required"}


def test_upsert_persona_generates_prompt(client, creator):
    response = client.post("/api/personas", json={"creator_id": "sarah_creates"})
    assert response.status_code == 200
    persona = response.json()
    assert persona["creator_id"] == creator.id
    assert persona["system_prompt"].startswith("You are sarah_creates.")

    fetched = client.get("/api/personas/sarah_creates").json()
    assert fetched["system_prompt"] == persona["system_prompt"]


def test_upsert_persona_unknown_creator(client):
    response = client.post("/api/personas", json={"creator_id": "nobody"})
    assert response.status_code == 404
    assert response.json() == {"error": "Creator not found"}


def test_direct_ai_chat(client):
    response = client.post("/api/chat/ai", json={"message": "hello", "systemPrompt": "be nice"})
    assert response.json() == {"response": "reply to: hello"}
