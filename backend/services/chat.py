import logging
from typing import Optional

from enums import ChatRole
from models.schemas import AiPersona, NewChatMessage
from services.ai_chat import AiChatClient
from services.payments import PaymentRequiredError, PaymentVerifier
from storage import Storage

logger = logging.getLogger(__name__)


class PersonaUnavailableError(Exception):
    pass


async def resolve_persona(storage: Storage, creator_ref: str) -> Optional[AiPersona]:
    """Find a persona by creator id, falling back to the creator's handle."""
    persona = await storage.get_persona(creator_ref)
    if persona:
        return persona
    creator = await storage.get_user_by_handle(creator_ref)
    if not creator:
        return None
    return await storage.get_persona(creator.id)


async def send_chat_message(
    storage: Storage,
    ai_client: AiChatClient,
    verifier: PaymentVerifier,
    creator_ref: str,
    user_pubkey: str,
    content: str,
    txn_sig: Optional[str] = None,
) -> str:
    """Store the user's message, get the persona's reply and store it.

    Args:
        creator_ref: Creator id or handle
        user_pubkey: Sender wallet

    Returns:
        The assistant reply

    Raises:
        PersonaUnavailableError: No active persona for the creator
        PaymentRequiredError: Payment verification is on and the message is unpaid
        AiServiceError: The chat provider failed
    """
    persona = await resolve_persona(storage, creator_ref)
    if not persona or not persona.is_active:
        raise PersonaUnavailableError(f"No active persona for {creator_ref}")

    creator = await storage.get_user(persona.creator_id)
    recipient = creator.solana_address if creator else None
    if not await verifier.verify(txn_sig, user_pubkey, recipient, persona.price_per_message):
        raise PaymentRequiredError(f"Chat payment to {persona.creator_id} could not be verified")

    await storage.create_chat_message(
        NewChatMessage(
            user_id=user_pubkey,
            creator_id=persona.creator_id,
            role=ChatRole.USER,
            content=content,
            txn_sig=txn_sig,
        )
    )

    reply = await ai_client.chat_with_ai(content, persona.system_prompt)

    await storage.create_chat_message(
        NewChatMessage(
            user_id=user_pubkey,
            creator_id=persona.creator_id,
            role=ChatRole.ASSISTANT,
            content=reply,
        )
    )
    logger.debug("Chat reply stored for %s -> %s", user_pubkey, persona.creator_id)
    return reply
