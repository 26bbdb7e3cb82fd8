"""
Catalog serializers
"""
from rest_framework import serializers

from apps.catalog.models import Category, Product, ProductImage
from apps.catalog.services import SORT_FIELDS
from apps.core.utils import round_rating
from apps.stores.models import Seller
from .common import page_query
from .reviews import ReviewSerializer


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ['id', 'url', 'alt', 'sort_order']
        read_only_fields = fields


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'slug']
        read_only_fields = fields


class SellerSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Seller
        fields = ['id', 'name', 'is_verified']
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    """
    Compact product used inside cart lines and order items.
    """
    images = ProductImageSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'title', 'slug', 'price', 'original_price', 'brand', 'stock_quantity', 'in_stock', 'images']
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """
    Listing representation. `rating` and `review_count` come from the
    annotations added by apps.catalog.services.with_ratings.
    """
    images = ProductImageSerializer(many=True, read_only=True)
    category = CategorySerializer(read_only=True)
    seller = SellerSummarySerializer(read_only=True)
    rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'title', 'slug', 'description', 'price', 'original_price', 'sku', 'brand',
            'weight', 'dimensions', 'stock_quantity', 'low_stock_threshold', 'in_stock', 'status',
            'specifications', 'features', 'variants', 'category', 'seller', 'store_id',
            'images', 'rating', 'review_count', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_rating(self, obj) -> float:
        return round_rating(getattr(obj, 'avg_rating', None))

    def get_review_count(self, obj) -> int:
        return getattr(obj, 'review_count', 0) or 0


class ProductDetailSerializer(ProductSerializer):
    reviews = serializers.SerializerMethodField()

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ['reviews']
        read_only_fields = fields

    def get_reviews(self, obj) -> list:
        latest = obj.reviews.select_related('user').order_by('-created_at')[:10]
        return ReviewSerializer(latest, many=True).data


class ImageInputSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=500)
    alt = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class ProductWriteSerializer(serializers.Serializer):
    """
    Body of POST /products and PUT /products/<id> (partial on update).
    """
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    original_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    sku = serializers.CharField(max_length=64)
    brand = serializers.CharField(max_length=100)
    weight = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, allow_null=True)
    dimensions = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    stock_quantity = serializers.IntegerField(min_value=0)
    low_stock_threshold = serializers.IntegerField(min_value=0, required=False)
    in_stock = serializers.BooleanField(required=False)
    status = serializers.ChoiceField(choices=Product.STATUS_CHOICES, required=False)
    specifications = serializers.ListField(child=serializers.DictField(), required=False)
    features = serializers.ListField(child=serializers.CharField(), required=False)
    variants = serializers.ListField(child=serializers.DictField(), required=False)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    seller_id = serializers.UUIDField(required=False, allow_null=True)
    store_id = serializers.UUIDField(required=False, allow_null=True)
    images = ImageInputSerializer(many=True, required=False)

    def validate_category_id(self, value):
        if value is not None and not Category.objects.filter(id=value).exists():
            raise serializers.ValidationError('Category not found')
        return value


class ProductQuerySerializer(page_query(max_limit=100, default_limit=20)):
    search = serializers.CharField(required=False, allow_blank=True)
    category_id = serializers.UUIDField(required=False)
    brand = serializers.CharField(required=False, allow_blank=True)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    in_stock = serializers.BooleanField(required=False, default=False)
    min_rating = serializers.FloatField(min_value=0, max_value=5, required=False)
    sort_by = serializers.ChoiceField(choices=list(SORT_FIELDS), required=False, default='created_at')
