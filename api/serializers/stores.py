"""
Store serializers
"""
from rest_framework import serializers

from apps.stores.models import Seller, Store, StoreReview
from apps.stores.services import ANALYTICS_PERIODS, SORT_FIELDS
from .catalog import ProductSerializer
from .common import page_query
from .reviews import ReviewAuthorSerializer

STORE_EDITABLE_FIELDS = [
    'name', 'description', 'category', 'address', 'city', 'state', 'zip_code', 'country',
    'phone', 'email', 'website', 'opening_hours', 'established_year', 'license_number',
    'tax_id', 'social_media',
]


class SellerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Seller
        fields = ['id', 'name', 'email', 'description', 'logo', 'is_verified']
        read_only_fields = fields


class StoreSerializer(serializers.ModelSerializer):
    seller = SellerSerializer(read_only=True)
    product_count = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()

    class Meta:
        model = Store
        fields = ['id', 'slug', 'seller'] + STORE_EDITABLE_FIELDS + [
            'status', 'is_active', 'is_premium', 'rating', 'total_reviews',
            'product_count', 'review_count', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_product_count(self, obj) -> int:
        return getattr(obj, 'product_count', 0) or 0

    def get_review_count(self, obj) -> int:
        return getattr(obj, 'review_count', 0) or 0


class StoreReviewSerializer(serializers.ModelSerializer):
    user = ReviewAuthorSerializer(read_only=True)

    class Meta:
        model = StoreReview
        fields = ['id', 'store_id', 'user', 'rating', 'title', 'content', 'images', 'is_verified', 'created_at']
        read_only_fields = fields


class StoreDetailSerializer(StoreSerializer):
    featured_products = ProductSerializer(many=True, read_only=True)
    latest_reviews = StoreReviewSerializer(many=True, read_only=True)

    class Meta(StoreSerializer.Meta):
        fields = StoreSerializer.Meta.fields + ['featured_products', 'latest_reviews']
        read_only_fields = fields


class EnrollStoreSerializer(serializers.ModelSerializer):
    """
    Store enrollment form. Status, activation and slug are server controlled.
    """
    class Meta:
        model = Store
        fields = STORE_EDITABLE_FIELDS
        extra_kwargs = {
            'description': {'required': True, 'allow_blank': False},
            'country': {'required': False},
        }


class StoreQuerySerializer(page_query(max_limit=50, default_limit=12)):
    category = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)
    rating = serializers.FloatField(min_value=0, max_value=5, required=False)
    is_premium = serializers.BooleanField(required=False, default=False)
    sort_by = serializers.ChoiceField(choices=list(SORT_FIELDS), required=False, default='created_at')


class StoreAnalyticsQuerySerializer(serializers.Serializer):
    period = serializers.ChoiceField(choices=list(ANALYTICS_PERIODS), required=False, default='30d')


class StoreAnalyticsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_products = serializers.IntegerField()
    average_rating = serializers.DecimalField(max_digits=2, decimal_places=1)
    total_reviews = serializers.IntegerField()


class CreateStoreReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    title = serializers.CharField(min_length=1, max_length=200)
    content = serializers.CharField(min_length=10, max_length=2000)
    images = serializers.ListField(child=serializers.URLField(), required=False, default=list)


class StoreStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[Store.APPROVED, Store.REJECTED, Store.SUSPENDED])
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
