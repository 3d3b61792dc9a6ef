from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from models.schemas import Tip


class TipStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_received: int = Field(alias="totalReceived")
    total_sent: int = Field(alias="totalSent")
    total_tips: int = Field(alias="totalTips")
    recent_tips: List[Tip] = Field(alias="recentTips")


class TipVerification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    verified: bool
    transaction_signature: str = Field(alias="transactionSignature")
    from_address: str = Field(alias="fromAddress")
    to_address: str = Field(alias="toAddress")
    amount: int
    timestamp: datetime
