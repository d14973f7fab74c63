from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from apps.common import get_logger
from .commands import CommentCreateCommand
from .dtos import CommentDTO
from .mappers import CommentMapper
from .protocols import CommentRepositoryProtocol, ProductLookupProtocol

logger = get_logger(__name__).bind(component="comments", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class CommentService:
    def __init__(
        self, comments: CommentRepositoryProtocol, products: ProductLookupProtocol
    ):
        self.comments = comments
        self.products = products
        self.logger = logger.bind(service="CommentService")

    def _product_missing(self, product_id: int) -> Optional[ErrorTuple]:
        if self.products.exists(id=product_id):
            return None
        self.logger.info("Comment request for missing product", product_id=product_id)
        return ("NOT_FOUND", "Product not found", {"id": str(product_id)})

    def list_comments(
        self, product_id: int
    ) -> Tuple[Optional[List[CommentDTO]], Optional[ErrorTuple]]:
        """Top-level comments newest first, each carrying its replies oldest first."""
        error = self._product_missing(product_id)
        if error:
            return None, error
        top_level = list(self.comments.list_top_level(product_id))
        replies_by_parent: Dict[int, List[CommentDTO]] = {c.id: [] for c in top_level}
        if top_level:
            for reply in self.comments.list_replies(replies_by_parent.keys()):
                bucket = replies_by_parent.get(reply.parent_id)
                # replies to replies are never created; skip stray rows
                if bucket is not None:
                    bucket.append(CommentMapper.to_dto(reply))
        self.logger.debug(
            "Listed comments", product_id=product_id, top_level=len(top_level)
        )
        return [
            CommentMapper.to_dto(c, replies_by_parent[c.id]) for c in top_level
        ], None

    def create_comment(
        self, product_id: int, author_id: int, payload: Dict[str, Any]
    ) -> Tuple[Optional[CommentDTO], Optional[ErrorTuple]]:
        cmd = CommentCreateCommand.from_raw(product_id, author_id, payload)
        if not cmd.is_valid:
            self.logger.warning(
                "Rejecting comment", product_id=product_id, errors=cmd.errors
            )
            return None, ("VALIDATION_ERROR", "Invalid comment", cmd.errors)
        error = self._product_missing(product_id)
        if error:
            return None, error
        if cmd.parent_id is not None:
            parent = self.comments.get(id=cmd.parent_id)
            if (
                parent is None
                or parent.product_id != product_id
                or parent.parent_id is not None
            ):
                self.logger.warning(
                    "Rejecting reply with invalid parent",
                    product_id=product_id,
                    parent_id=cmd.parent_id,
                )
                return None, (
                    "VALIDATION_ERROR",
                    "Replies must target a top-level comment of the same product",
                    {"parent_id": str(cmd.parent_id)},
                )
        comment = self.comments.create(
            product_id=product_id,
            author_id=author_id,
            content=cmd.content,
            parent_id=cmd.parent_id,
        )
        self.logger.info(
            "Comment created",
            comment_id=comment.id,
            product_id=product_id,
            author_id=author_id,
            is_reply=cmd.parent_id is not None,
        )
        return CommentMapper.to_dto(comment), None
