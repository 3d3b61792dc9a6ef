"""
Behavior specific to the SQL backend
"""

import pytest
from sqlalchemy import event

from models.schemas import NewPost, NewPurchase
from storage import DuplicateRecordError, StorageError
from storage.sql import SqlStorage


@pytest.fixture
async def fk_storage(tmp_path):
    """SQLite with foreign keys enforced, as Postgres always does"""
    storage = SqlStorage(f"sqlite+aiosqlite:///{tmp_path}/fk.db")

    @event.listens_for(storage._engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await storage.initialize()
    yield storage
    await storage.close()


async def test_foreign_key_failure_is_not_a_duplicate(fk_storage):
    with pytest.raises(StorageError) as excinfo:
        await fk_storage.create_purchase(
            NewPurchase(
                user_id="fan", post_id="missing-post", amount_lamports=100, txn_sig="sig1"
            )
        )
    assert not isinstance(excinfo.value, DuplicateRecordError)
    assert "FOREIGN KEY" in str(excinfo.value)


async def test_repeat_purchase_is_a_duplicate_with_foreign_keys_on(fk_storage):
    post = await fk_storage.create_post(
        NewPost(
            creator_id="creator",
            media_url="https://cdn.example.com/a.jpg",
            thumb_url="https://cdn.example.com/a_thumb.jpg",
            price_lamports=100,
        )
    )
    purchase = NewPurchase(user_id="fan", post_id=post.id, amount_lamports=100, txn_sig="sig1")
    await fk_storage.create_purchase(purchase)

    with pytest.raises(DuplicateRecordError):
        await fk_storage.create_purchase(purchase)
    assert len(await fk_storage.get_purchases(user_id="fan")) == 1
