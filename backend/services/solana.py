import logging
import random
import re
from typing import Any, Dict, List, Optional

import requests

from config import GOON_VANITY_ADDRESSES, LAMPORTS_PER_SOL

logger = logging.getLogger(__name__)

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
_BASE58_ADDRESS = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def validate_solana_address(address: str) -> bool:
    """Base58 public key, 32 to 44 characters."""
    return bool(address) and bool(_BASE58_ADDRESS.match(address))


def generate_goon_token() -> str:
    """Pick a mint address from the pre-mined vanity pool.

    The pick is not reserved, so two launches can share an address.
    """
    return random.choice(GOON_VANITY_ADDRESSES)


class SolanaRpcError(Exception):
    pass


class SolanaClient:
    def __init__(self, rpc_url: str, timeout: float = 10.0):
        self.rpc_url = rpc_url
        self.timeout = timeout

    def _rpc(self, method: str, params: List[Any]) -> Any:
        """Call a JSON-RPC method and return its result.

        Raises:
            requests.HTTPError: If the HTTP request fails
            SolanaRpcError: If the node returns an error object
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        response = requests.post(self.rpc_url, json=payload, timeout=self.timeout)
        response.raise_for_status()

        body = response.json()
        if body.get("error"):
            raise SolanaRpcError(f"{method} failed: {body['error'].get('message', body['error'])}")
        return body.get("result")

    def get_balance(self, address: str) -> int:
        """Balance in lamports."""
        result = self._rpc("getBalance", [address, {"commitment": "confirmed"}])
        return result["value"]

    def get_wallet_balance(self, address: str) -> float:
        """Balance in SOL; 0.0 when the lookup fails."""
        try:
            return self.get_balance(address) / LAMPORTS_PER_SOL
        except Exception as e:
            logger.error("Failed to get wallet balance for %s: %s", address, e)
            return 0.0

    def get_transaction(self, signature: str) -> Optional[Dict[str, Any]]:
        return self._rpc(
            "getTransaction",
            [
                signature,
                {
                    "commitment": "confirmed",
                    "encoding": "json",
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )

    def verify_transaction(
        self,
        signature: str,
        expected_sender: str,
        expected_recipient: str,
        expected_amount_lamports: int,
    ) -> bool:
        """Check that a confirmed system transfer moved the expected amount.

        The recipient must gain exactly the amount; the sender must lose more
        than zero (amount plus fees).
        """
        try:
            tx = self.get_transaction(signature)
            if not tx:
                logger.error("Transaction not found: %s", signature)
                return False

            meta = tx.get("meta") or {}
            if meta.get("err"):
                logger.error("Transaction failed: %s %s", signature, meta["err"])
                return False

            message = tx["transaction"]["message"]
            account_keys: List[str] = message["accountKeys"]
            transfer = next(
                (
                    ix
                    for ix in message["instructions"]
                    if account_keys[ix["programIdIndex"]] == SYSTEM_PROGRAM_ID
                ),
                None,
            )
            if transfer is None:
                logger.error("No SystemProgram transfer found in transaction: %s", signature)
                return False

            sender = account_keys[transfer["accounts"][0]]
            recipient = account_keys[transfer["accounts"][1]]
            if sender != expected_sender or recipient != expected_recipient:
                logger.error(
                    "Transfer parties mismatch in %s: %s -> %s", signature, sender, recipient
                )
                return False

            pre, post = meta["preBalances"], meta["postBalances"]
            sender_idx = account_keys.index(expected_sender)
            recipient_idx = account_keys.index(expected_recipient)
            recipient_change = post[recipient_idx] - pre[recipient_idx]
            sender_change = post[sender_idx] - pre[sender_idx]

            if recipient_change != expected_amount_lamports or sender_change >= 0:
                logger.error(
                    "Amount mismatch in %s: expected +%d, got +%d",
                    signature,
                    expected_amount_lamports,
                    recipient_change,
                )
                return False
            return True
        except Exception as e:
            logger.error("Failed to verify transaction %s: %s", signature, e)
            return False
