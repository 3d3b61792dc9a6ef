"""
Request-scoped dependencies and shared route helpers
"""

import logging
from contextlib import contextmanager
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from config import Settings
from services.activity import ActivityService
from services.ai_chat import AiChatClient
from services.payments import PaymentVerifier
from services.solana import SolanaClient
from storage import Storage

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ai_client(request: Request) -> AiChatClient:
    return request.app.state.ai_client


def get_solana_client(request: Request) -> SolanaClient:
    return request.app.state.solana_client


def get_payment_verifier(request: Request) -> PaymentVerifier:
    return request.app.state.payment_verifier


def get_activity_service(
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> ActivityService:
    return ActivityService(storage, settings.activity_fanout_warn_threshold)


@contextmanager
def handle_route_errors(message: str):
    """Turn unexpected failures into a logged 500 carrying message.
    HTTP and validation errors pass through untouched."""
    try:
        yield
    except (HTTPException, RequestValidationError, ValidationError):
        raise
    except Exception as e:
        logger.exception(message)
        raise HTTPException(status_code=500, detail=message) from e


def require_param(value: Optional[str], message: str) -> str:
    if not value:
        raise HTTPException(status_code=400, detail=message)
    return value


def page_bounds(page: int, limit: int) -> tuple[int, int]:
    """Clamp limit and return (offset, limit) for a 1-based page."""
    limit = min(limit, MAX_PAGE_SIZE)
    return (page - 1) * limit, limit
