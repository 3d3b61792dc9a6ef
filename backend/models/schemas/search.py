from dataclasses import dataclass, field
from typing import List

from models.schemas.commerce import Token
from models.schemas.posts import Post
from models.schemas.users import User


@dataclass
class SearchResults:
    users: List[User] = field(default_factory=list)
    posts: List[Post] = field(default_factory=list)
    tokens: List[Token] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.users) + len(self.posts) + len(self.tokens)
