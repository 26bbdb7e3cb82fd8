"""
Abstract base model shared by every storefront table
"""
import uuid

from django.db import models


class BaseModel(models.Model):
    """
    UUID primary key plus creation/update timestamps.

    Listings (products, orders, reviews, stores) page newest first, so
    `created_at` is indexed.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']
        get_latest_by = 'created_at'

    def __str__(self):
        return f"{self.__class__.__name__} {self.id}"
