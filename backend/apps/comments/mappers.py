from typing import List, Optional

from .dtos import CommentAuthorDTO, CommentDTO
from .models import Comment


class CommentMapper:
    @staticmethod
    def author_to_dto(user) -> CommentAuthorDTO:
        return CommentAuthorDTO(
            id=user.id,
            first_name=user.first_name or "",
            last_name=user.last_name or "",
            avatar_url=getattr(user, "avatar_url", "") or "",
        )

    @staticmethod
    def to_dto(comment: Comment, replies: Optional[List[CommentDTO]] = None) -> CommentDTO:
        return CommentDTO(
            id=comment.id,
            product_id=comment.product_id,
            parent_id=comment.parent_id,
            content=comment.content,
            created_at=comment.created_at.isoformat() if comment.created_at else "",
            author=CommentMapper.author_to_dto(comment.author),
            replies=list(replies or []),
        )
