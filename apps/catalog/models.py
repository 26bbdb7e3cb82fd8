"""
Catalog Models - Product Listing
Tables: Categories, Products, ProductImages
"""
from django.db import models
from django.db.models import Q

from apps.core.models import BaseModel


class Category(BaseModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True)
    description = models.TextField(blank=True, null=True)
    parent = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='children',
    )

    class Meta:
        db_table = 'catalog_categories'
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['name']

    def __str__(self):
        return self.name


class ProductQuerySet(models.QuerySet):

    def marketplace_visible(self):
        """
        Active products that are either sold directly or belong to an approved, active store.
        """
        return self.filter(status=Product.ACTIVE).filter(
            Q(store__isnull=True) | Q(store__status='APPROVED', store__is_active=True)
        )


class Product(BaseModel):
    """
    Product in the catalog.

    `in_stock` is a merchandising flag maintained by sellers; it is not
    recomputed when `stock_quantity` changes.
    """
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'
    DRAFT = 'DRAFT'
    STATUS_CHOICES = [
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
        (DRAFT, 'Draft'),
    ]

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=300, unique=True)
    description = models.TextField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    original_price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    sku = models.CharField(max_length=64, unique=True)
    brand = models.CharField(max_length=100)
    weight = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    dimensions = models.CharField(max_length=100, blank=True, null=True)
    stock_quantity = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.PositiveIntegerField(default=10)
    in_stock = models.BooleanField(default=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ACTIVE)
    specifications = models.JSONField(default=list, blank=True, help_text="List of {name, value}")
    features = models.JSONField(default=list, blank=True)
    variants = models.JSONField(default=list, blank=True, help_text="List of {name, options}")

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products',
    )
    seller = models.ForeignKey(
        'stores.Seller',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products',
    )
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products',
    )

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = 'catalog_products'
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        constraints = [
            models.CheckConstraint(
                condition=Q(stock_quantity__gte=0),
                name='product_stock_quantity_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.title} (${self.price})"


class ProductImage(BaseModel):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='images')
    url = models.URLField(max_length=500)
    alt = models.CharField(max_length=255, blank=True, null=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'catalog_product_images'
        ordering = ['sort_order']

    def __str__(self):
        return self.url
