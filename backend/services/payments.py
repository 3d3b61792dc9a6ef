"""
Payment verification gate for unlocks, persona chat and tips.
"""

import asyncio
import logging
from typing import Optional

from services.solana import SolanaClient

logger = logging.getLogger(__name__)


class PaymentVerifier:
    """Verifies that a signature pays the expected amount.

    With verification disabled every payment is accepted and a warning is
    logged on each call. That mode exists for local development only.
    """

    def __init__(self, solana: SolanaClient, enabled: bool):
        self.solana = solana
        self.enabled = enabled

    async def verify(
        self,
        txn_sig: Optional[str],
        sender: str,
        recipient: Optional[str],
        amount_lamports: int,
    ) -> bool:
        if not self.enabled:
            logger.warning(
                "Payment verification disabled: accepting %d lamports from %s unverified",
                amount_lamports,
                sender,
            )
            return True
        if amount_lamports <= 0:
            return True
        if not txn_sig or not recipient:
            logger.warning("Payment from %s rejected: missing signature or recipient", sender)
            return False
        # requests is blocking
        return await asyncio.to_thread(
            self.solana.verify_transaction, txn_sig, sender, recipient, amount_lamports
        )


class PaymentRequiredError(Exception):
    """The supplied transaction does not pay for the requested item."""
