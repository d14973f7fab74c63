from django.db import models


class CartSnapshot(models.Model):
    """Persisted cart state for one owner (a user or an anonymous session)."""

    storage_key = models.CharField(max_length=191, unique=True)
    payload = models.JSONField(default=dict)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "cart_snapshots"

    def __str__(self):
        return self.storage_key
