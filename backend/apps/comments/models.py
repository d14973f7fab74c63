from django.conf import settings
from django.db import models

from apps.catalog.models import Product


class Comment(models.Model):
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="comments"
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments"
    )
    content = models.TextField()
    # One level of nesting; replies always point at a top-level comment
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="replies",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "comments"
        indexes = [
            models.Index(
                fields=["product", "parent", "created_at"],
                name="comment_thread_idx",
            ),
        ]

    def __str__(self):
        return f"Comment {self.id} on product {self.product_id}"
