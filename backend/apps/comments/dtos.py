from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CommentAuthorDTO:
    id: int
    first_name: str
    last_name: str
    avatar_url: str


@dataclass
class CommentDTO:
    id: int
    product_id: int
    parent_id: Optional[int]
    content: str
    created_at: str
    author: CommentAuthorDTO
    replies: List["CommentDTO"] = field(default_factory=list)
