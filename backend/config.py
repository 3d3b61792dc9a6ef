"""
Application configuration
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from enums import ModelProvider, StorageBackend

load_dotenv()

# Pre-mined mint addresses ending in "goon". Launches draw from this pool at random,
# so two launches can receive the same address.
GOON_VANITY_ADDRESSES: List[str] = [
    "2BxkGHtRjyZp3Q7vL8sM9XN4JeRaKjWzDxYpGqNvgoon",
    "7A3kMpLqRzJx4Q8vN2sP6XY9JeRaKjWzDxYpGqNvgoon",
    "9CzpRxMqTjLp5Q7vL8sM3XN4JeRaKjWzDxYpGqNvgoon",
]

LAMPORTS_PER_SOL = 1_000_000_000
DEFAULT_PRICE_PER_MESSAGE_LAMPORTS = 1_000_000  # 0.001 SOL


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    storage_backend: StorageBackend = StorageBackend.MEMORY
    database_url: Optional[str] = None

    ai_provider: ModelProvider = ModelProvider.XAI
    ai_api_key: Optional[str] = None
    ai_model: str = "grok-2-1212"

    solana_rpc_url: str = "https://api.devnet.solana.com"
    verify_payments: bool = False

    activity_fanout_warn_threshold: int = 1000
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        provider = ModelProvider(os.getenv("AI_PROVIDER", ModelProvider.XAI.value))
        key_var = "XAI_API_KEY" if provider == ModelProvider.XAI else "OPENAI_API_KEY"
        return cls(
            storage_backend=StorageBackend(
                os.getenv("STORAGE_BACKEND", StorageBackend.MEMORY.value).lower()
            ),
            database_url=os.getenv("DATABASE_URL"),
            ai_provider=provider,
            ai_api_key=os.getenv(key_var),
            ai_model=os.getenv("XAI_MODEL", "grok-2-1212"),
            solana_rpc_url=os.getenv("SOLANA_RPC_URL", "https://api.devnet.solana.com"),
            verify_payments=_env_bool("VERIFY_PAYMENTS", False),
            activity_fanout_warn_threshold=_env_int("ACTIVITY_FANOUT_WARN_THRESHOLD", 1000),
            cors_origins=_env_list("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
