from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from models.responses.common import OffsetPagination
from models.responses.posts import PostView
from models.schemas import Token, User


class SearchResponse(BaseModel):
    """Lists not covered by the requested type are empty"""

    users: List[User] = Field(default_factory=list)
    posts: List[PostView] = Field(default_factory=list)
    tokens: List[Token] = Field(default_factory=list)
    pagination: OffsetPagination


class Suggestion(BaseModel):
    type: Literal["user", "post"]
    id: str
    title: str
    subtitle: Optional[str] = None
    avatar: Optional[str] = None
    thumbnail: Optional[str] = None


class SuggestionsResponse(BaseModel):
    suggestions: List[Suggestion]


class TrendingResponse(BaseModel):
    posts: List[PostView]
    timeframe: str
    type: str
    total: int


class DiscoverResponse(BaseModel):
    # Posts and live streams mixed; each item carries its creator
    content: List[Dict[str, Any]]
    pagination: OffsetPagination
