"""
Stores Models - Marketplace Sellers
Tables: Sellers, Stores, StoreReviews
"""
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import BaseModel


class Seller(BaseModel):
    """
    Seller account. Linked to the storefront user who enrolled it.
    """
    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='seller_profile',
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    description = models.TextField(blank=True, null=True)
    logo = models.URLField(blank=True, null=True)
    is_verified = models.BooleanField(default=False)

    class Meta:
        db_table = 'stores_sellers'
        verbose_name = 'Seller'
        verbose_name_plural = 'Sellers'

    def __str__(self):
        return f"{self.name} ({self.email})"


class Store(BaseModel):
    """
    Storefront owned by a seller, subject to admin approval.

    `is_active` is written together with `status` by the approval endpoint
    and is not re-derived afterwards.
    """
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    SUSPENDED = 'SUSPENDED'
    STATUS_CHOICES = [
        (PENDING, 'Pending Review'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
        (SUSPENDED, 'Suspended'),
    ]

    seller = models.ForeignKey(Seller, on_delete=models.CASCADE, related_name='stores')
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True)
    description = models.TextField(blank=True, null=True)
    category = models.CharField(max_length=100)
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20)
    country = models.CharField(max_length=100, default='United States')
    phone = models.CharField(max_length=30, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    website = models.URLField(blank=True, null=True)
    opening_hours = models.CharField(max_length=255, blank=True, null=True)
    established_year = models.PositiveIntegerField(blank=True, null=True)
    license_number = models.CharField(max_length=100, blank=True, null=True)
    tax_id = models.CharField(max_length=100, blank=True, null=True)
    social_media = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    is_active = models.BooleanField(default=False)
    is_premium = models.BooleanField(default=False)
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=0)
    total_reviews = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'stores_stores'
        verbose_name = 'Store'
        verbose_name_plural = 'Stores'

    def __str__(self):
        return f"{self.name} [{self.status}]"

    @property
    def is_visible(self):
        return self.status == self.APPROVED and self.is_active


class StoreReview(BaseModel):
    """
    Customer review of a store. One per (store, user).
    """
    store = models.ForeignKey(Store, on_delete=models.CASCADE, related_name='store_reviews')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='store_reviews')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    title = models.CharField(max_length=200)
    content = models.TextField()
    images = models.JSONField(default=list, blank=True)
    is_verified = models.BooleanField(default=False)

    class Meta:
        db_table = 'stores_store_reviews'
        verbose_name = 'Store Review'
        verbose_name_plural = 'Store Reviews'
        constraints = [
            models.UniqueConstraint(fields=['store', 'user'], name='unique_store_review_per_user'),
        ]

    def __str__(self):
        return f"Store review {self.rating}/5 for {self.store_id}"
