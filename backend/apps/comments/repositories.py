from apps.common.repository import GenericRepository
from .models import Comment


class CommentRepository(GenericRepository[Comment]):
    def __init__(self):
        super().__init__(Comment)

    def list_top_level(self, product_id: int):
        """Top-level comments of a product, newest first."""
        return (
            self.model.objects.filter(product_id=product_id, parent__isnull=True)
            .select_related("author")
            .order_by("-created_at", "-id")
        )

    def list_replies(self, parent_ids):
        """Replies to the given comments, oldest first."""
        return (
            self.model.objects.filter(parent_id__in=list(parent_ids))
            .select_related("author")
            .order_by("created_at", "id")
        )
