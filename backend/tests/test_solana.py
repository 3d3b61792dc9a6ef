import pytest
import requests

from services import solana
from services.payments import PaymentVerifier
from services.solana import SYSTEM_PROGRAM_ID, SolanaClient, validate_solana_address

SENDER = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"
RECIPIENT = "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"


class FakeResponse:
    def __init__(self, body):
        self._body = body

    def raise_for_status(self):
        pass

    def json(self):
        return self._body


def _transaction(amount=1000, err=None, sender=SENDER, recipient=RECIPIENT):
    return {
        "meta": {
            "err": err,
            "preBalances": [10_000, 0, 1],
            "postBalances": [10_000 - amount - 5, amount, 1],
        },
        "transaction": {
            "message": {
                "accountKeys": [sender, recipient, SYSTEM_PROGRAM_ID],
                "instructions": [{"programIdIndex": 2, "accounts": [0, 1]}],
            }
        },
    }


@pytest.fixture
def rpc(monkeypatch):
    calls = []

    def install(result=None, error=None):
        def fake_post(url, json, timeout):
            calls.append(json)
            if error is not None:
                return FakeResponse({"jsonrpc": "2.0", "id": 1, "error": error})
            return FakeResponse({"jsonrpc": "2.0", "id": 1, "result": result})

        monkeypatch.setattr(solana.requests, "post", fake_post)
        return calls

    return install


def test_verify_matching_transfer(rpc):
    calls = rpc(_transaction())
    assert SolanaClient("http://rpc").verify_transaction("sig", SENDER, RECIPIENT, 1000) is True
    assert calls[0]["method"] == "getTransaction"
    assert calls[0]["params"][0] == "sig"


def test_verify_wrong_amount(rpc):
    rpc(_transaction(amount=999))
    assert SolanaClient("http://rpc").verify_transaction("sig", SENDER, RECIPIENT, 1000) is False


def test_verify_failed_transaction(rpc):
    rpc(_transaction(err={"InstructionError": [0, "Custom"]}))
    assert SolanaClient("http://rpc").verify_transaction("sig", SENDER, RECIPIENT, 1000) is False


def test_verify_wrong_recipient(rpc):
    rpc(_transaction())
    other = "So11111111111111111111111111111111111111112"
    assert SolanaClient("http://rpc").verify_transaction("sig", SENDER, other, 1000) is False


def test_verify_missing_transaction(rpc):
    rpc(None)
    assert SolanaClient("http://rpc").verify_transaction("sig", SENDER, RECIPIENT, 1000) is False


def test_verify_rpc_error(rpc):
    rpc(error={"code": -32602, "message": "Invalid param"})
    assert SolanaClient("http://rpc").verify_transaction("sig", SENDER, RECIPIENT, 1000) is False


def test_wallet_balance(rpc):
    rpc({"context": {"slot": 1}, "value": 2_500_000_000})
    assert SolanaClient("http://rpc").get_wallet_balance(SENDER) == 2.5


def test_wallet_balance_on_network_failure(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(solana.requests, "post", boom)
    assert SolanaClient("http://rpc").get_wallet_balance(SENDER) == 0.0


@pytest.mark.parametrize(
    "address, valid",
    [
        (SENDER, True),
        ("So11111111111111111111111111111111111111112", True),
        ("", False),
        ("short", False),
        ("0OIl" * 10, False),
    ],
)
def test_validate_solana_address(address, valid):
    assert validate_solana_address(address) is valid


async def test_verifier_disabled_accepts_everything(caplog):
    verifier = PaymentVerifier(SolanaClient("http://rpc"), enabled=False)
    assert await verifier.verify(None, SENDER, None, 1000) is True
    assert "Payment verification disabled" in caplog.text


async def test_verifier_free_items_pass():
    verifier = PaymentVerifier(SolanaClient("http://rpc"), enabled=True)
    assert await verifier.verify(None, SENDER, RECIPIENT, 0) is True


async def test_verifier_requires_signature():
    verifier = PaymentVerifier(SolanaClient("http://rpc"), enabled=True)
    assert await verifier.verify(None, SENDER, RECIPIENT, 1000) is False
    assert await verifier.verify("sig", SENDER, None, 1000) is False


async def test_verifier_checks_chain(rpc):
    rpc(_transaction())
    verifier = PaymentVerifier(SolanaClient("http://rpc"), enabled=True)
    assert await verifier.verify("sig", SENDER, RECIPIENT, 1000) is True
