"""
Review serializers
"""
from rest_framework import serializers

from apps.accounts.models import User
from apps.catalog.models import Product
from apps.reviews.models import Review
from .common import page_query


class ReviewAuthorSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name', 'avatar']
        read_only_fields = fields


class ReviewedProductSerializer(serializers.ModelSerializer):
    image = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'title', 'slug', 'price', 'image']
        read_only_fields = fields

    def get_image(self, obj):
        first = next(iter(obj.images.all()), None)
        return first.url if first else None


class ReviewSerializer(serializers.ModelSerializer):
    user = ReviewAuthorSerializer(read_only=True)

    class Meta:
        model = Review
        fields = [
            'id', 'product_id', 'user', 'rating', 'title', 'content', 'images',
            'is_verified', 'helpful', 'not_helpful', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class MyReviewSerializer(ReviewSerializer):
    product = ReviewedProductSerializer(read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ['product']
        read_only_fields = fields


class CreateReviewSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    title = serializers.CharField(min_length=1, max_length=200)
    content = serializers.CharField(min_length=10, max_length=2000)
    images = serializers.ListField(child=serializers.URLField(), required=False, default=list)


class UpdateReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    title = serializers.CharField(min_length=1, max_length=200, required=False)
    content = serializers.CharField(min_length=10, max_length=2000, required=False)
    images = serializers.ListField(child=serializers.URLField(), required=False)


class HelpfulVoteSerializer(serializers.Serializer):
    helpful = serializers.BooleanField()


class ReviewQuerySerializer(page_query(max_limit=50, default_limit=10)):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    verified = serializers.BooleanField(required=False, allow_null=True, default=None)
    sort_by = serializers.ChoiceField(choices=['created_at', 'rating', 'helpful'], required=False, default='created_at')
