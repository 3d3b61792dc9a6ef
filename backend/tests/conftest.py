from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from models.schemas import NewPost, NewUser
from services.ai_chat import ModerationResult
from services.rate_limiter import ProviderLimiterRegistry
from services.solana import SolanaClient
from storage import MemStorage
from storage.sql import SqlStorage

CREATOR_WALLET = "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"
FAN_WALLET = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"


class FakeAiClient:
    """Deterministic stand-in for the LLM-backed client"""

    configured = True

    def __init__(self):
        self.calls: List[Tuple[str, str]] = []

    async def chat_with_ai(self, user_message: str, system_prompt: str = "") -> str:
        self.calls.append((user_message, system_prompt))
        return f"reply to: {user_message}"

    async def moderate_content(self, content: str) -> ModerationResult:
        if "forbidden" in content:
            return ModerationResult(is_appropriate=False, reason="Contains forbidden content")
        return ModerationResult(is_appropriate=True)

    async def generate_persona_prompt(self, bio: str, handle: str) -> str:
        return f"You are {handle}. {bio}".strip()


@pytest.fixture(autouse=True)
def reset_rate_limiters():
    yield
    ProviderLimiterRegistry.reset()


@pytest.fixture
def settings():
    return Settings(verify_payments=False, activity_fanout_warn_threshold=2)


@pytest.fixture
def mem_storage():
    return MemStorage()


@pytest.fixture
async def sql_storage(tmp_path):
    storage = SqlStorage(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    await storage.initialize()
    yield storage
    await storage.close()


@pytest.fixture(params=["memory", "sql"])
async def storage(request, tmp_path):
    """Every storage backend, for behavior both must share"""
    if request.param == "memory":
        yield MemStorage()
        return
    backend = SqlStorage(f"sqlite+aiosqlite:///{tmp_path}/shared.db")
    await backend.initialize()
    yield backend
    await backend.close()


@pytest.fixture
def ai_client():
    return FakeAiClient()


@pytest.fixture
def app(settings, mem_storage, ai_client):
    return create_app(
        settings=settings,
        storage=mem_storage,
        ai_client=ai_client,
        solana_client=SolanaClient("http://solana.invalid"),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def creator(mem_storage):
    return await mem_storage.create_user(
        NewUser(
            id=CREATOR_WALLET,
            goon_username="sarah",
            handle="sarah_creates",
            bio="Photographer and streamer",
            is_creator=True,
            solana_address=CREATOR_WALLET,
        )
    )


@pytest.fixture
async def fan(mem_storage):
    return await mem_storage.create_user(NewUser(id=FAN_WALLET, goon_username="fan"))


@pytest.fixture
async def paid_post(mem_storage, creator):
    return await mem_storage.create_post(
        NewPost(
            creator_id=creator.id,
            media_url="https://cdn.example.com/full.mp4",
            thumb_url="https://cdn.example.com/thumb.jpg",
            caption="Behind the scenes",
            price_lamports=5_000_000,
            tags=["bts", "video"],
        )
    )
