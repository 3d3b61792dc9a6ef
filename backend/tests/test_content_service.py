from models.schemas import NewPost, NewPurchase
from services import content
from services.content import ALREADY_UNLOCKED, UnlockResult
from services.payments import PaymentVerifier
from services.solana import SolanaClient

FAN = "fan-wallet"


async def _priced_post(storage):
    return await storage.create_post(
        NewPost(
            creator_id="creator",
            media_url="https://cdn.example.com/full.jpg",
            thumb_url="https://cdn.example.com/thumb.jpg",
            price_lamports=5_000_000,
        )
    )


def _verifier():
    return PaymentVerifier(SolanaClient("http://solana.invalid"), enabled=False)


async def test_unlock_records_one_purchase(storage):
    post = await _priced_post(storage)

    first = await content.unlock_post(storage, _verifier(), post, FAN, txn_sig="sig1")
    again = await content.unlock_post(storage, _verifier(), post, FAN, txn_sig="sig2")

    assert first == UnlockResult(success=True)
    assert again == UnlockResult(success=True, message=ALREADY_UNLOCKED)
    purchases = await storage.get_purchases(user_id=FAN)
    assert [p.txn_sig for p in purchases] == ["sig1"]


async def test_unlock_that_loses_the_insert_race_reports_already_unlocked(storage, monkeypatch):
    post = await _priced_post(storage)
    # Another request recorded the purchase after this one checked
    await storage.create_purchase(
        NewPurchase(
            user_id=FAN, post_id=post.id, amount_lamports=post.price_lamports, txn_sig="sig1"
        )
    )

    async def stale_has_purchased(user_id, post_id):
        return False

    monkeypatch.setattr(storage, "has_purchased", stale_has_purchased)

    result = await content.unlock_post(storage, _verifier(), post, FAN, txn_sig="sig2")

    assert result == UnlockResult(success=True, message=ALREADY_UNLOCKED)
    assert len(await storage.get_purchases(user_id=FAN)) == 1
