"""
Pydantic schemas for GOON tokens and tips
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

GOON_SYMBOL = "GOON"


class NewToken(BaseModel):
    """Insert shape for a token launch.

    The GOON naming rule lives here so that every caller, HTTP or not,
    goes through it before anything reaches storage.
    """

    creator_id: Optional[str] = None
    mint_address: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=64)
    symbol: str
    supply: int = Field(gt=0)
    image_url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_end_with_goon(cls, value: str) -> str:
        if not value.upper().endswith(GOON_SYMBOL):
            raise ValueError("Token name must end with GOON")
        return value

    @field_validator("symbol")
    @classmethod
    def symbol_must_be_goon(cls, value: str) -> str:
        if value.upper() != GOON_SYMBOL:
            raise ValueError("Token symbol must be GOON")
        return GOON_SYMBOL


class Token(NewToken):
    id: str
    created_at: datetime


class NewTip(BaseModel):
    from_user: str = Field(min_length=1)
    to_user: str = Field(min_length=1)
    amount_lamports: int = Field(gt=0)
    message: Optional[str] = Field(default=None, max_length=500)
    txn_sig: str = Field(min_length=1)


class Tip(NewTip):
    id: str
    created_at: datetime


# Request models
class LaunchTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    symbol: str
    supply: int
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    creator_id: Optional[str] = Field(default=None, alias="creatorId")
    description: Optional[str] = None


class VerifyTransactionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transaction_signature: str = Field(alias="transactionSignature", min_length=1)
    from_address: str = Field(alias="fromAddress", min_length=1)
    to_address: str = Field(alias="toAddress", min_length=1)
    amount: int = Field(gt=0)  # lamports
