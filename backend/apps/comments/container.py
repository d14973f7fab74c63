from __future__ import annotations

from apps.catalog.repositories import ProductRepository

from .repositories import CommentRepository
from .services import CommentService


def build_comment_service() -> CommentService:
    return CommentService(comments=CommentRepository(), products=ProductRepository())
