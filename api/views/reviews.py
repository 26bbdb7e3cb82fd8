"""
Product review endpoints
"""
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView

from apps.catalog.models import Product
from apps.core.exceptions import NotFoundException
from apps.core.utils import paginate
from apps.reviews import services
from apps.reviews.models import Review
from ..serializers.reviews import (
    CreateReviewSerializer,
    HelpfulVoteSerializer,
    MyReviewSerializer,
    ReviewedProductSerializer,
    ReviewQuerySerializer,
    ReviewSerializer,
    UpdateReviewSerializer,
)
from .base import PublicAPIView, PublicReadMixin, success, validate


class ProductReviewsView(PublicAPIView):

    @extend_schema(parameters=[ReviewQuerySerializer], responses={200: ReviewSerializer(many=True)})
    def get(self, request, product_id):
        query = validate(ReviewQuerySerializer, request.query_params)
        if not Product.objects.filter(id=product_id).exists():
            raise NotFoundException('Product not found')

        reviews = Review.objects.filter(product_id=product_id).select_related('user')
        if query.get('rating'):
            reviews = reviews.filter(rating=query['rating'])
        if query.get('verified') is not None:
            reviews = reviews.filter(is_verified=query['verified'])

        prefix = '' if query['sort_order'] == 'asc' else '-'
        reviews = reviews.order_by(f"{prefix}{query['sort_by']}", '-created_at')

        page, meta = paginate(reviews, query['page'], query['limit'])
        return success(
            'Reviews retrieved successfully',
            {
                'reviews': ReviewSerializer(page, many=True).data,
                'summary': services.rating_summary(product_id),
            },
            meta,
        )


class ReviewCreateView(APIView):

    @extend_schema(request=CreateReviewSerializer, responses={201: ReviewSerializer})
    def post(self, request):
        data = validate(CreateReviewSerializer, request.data)
        review = services.create_review(
            request.user,
            data['product_id'],
            rating=data['rating'],
            title=data['title'],
            content=data['content'],
            images=data.get('images'),
        )
        return success(
            'Review created successfully',
            {'review': ReviewSerializer(review).data},
            status_code=status.HTTP_201_CREATED,
        )


class ReviewDetailView(PublicReadMixin, PublicAPIView):

    @extend_schema(responses={200: ReviewSerializer})
    def get(self, request, review_id):
        review = Review.objects.select_related('user').filter(id=review_id).first()
        if review is None:
            raise NotFoundException('Review not found')
        return success('Review retrieved successfully', {'review': ReviewSerializer(review).data})

    @extend_schema(request=UpdateReviewSerializer, responses={200: ReviewSerializer})
    def put(self, request, review_id):
        data = validate(UpdateReviewSerializer, request.data)
        review = services.update_review(request.user, review_id, data)
        return success('Review updated successfully', {'review': ReviewSerializer(review).data})

    def delete(self, request, review_id):
        services.delete_review(request.user, review_id)
        return success('Review deleted successfully')


class ReviewHelpfulView(APIView):

    @extend_schema(request=HelpfulVoteSerializer, responses={200: ReviewSerializer})
    def post(self, request, review_id):
        data = validate(HelpfulVoteSerializer, request.data)
        review = services.vote_helpful(request.user, review_id, data['helpful'])
        return success(
            'Review helpfulness updated',
            {'review': {'id': review.id, 'helpful': review.helpful, 'not_helpful': review.not_helpful}},
        )


class MyReviewsView(APIView):

    @extend_schema(responses={200: MyReviewSerializer(many=True)})
    def get(self, request):
        query = validate(ReviewQuerySerializer, request.query_params)
        reviews = (
            Review.objects.filter(user=request.user)
            .select_related('user', 'product')
            .prefetch_related('product__images')
            .order_by('-created_at')
        )
        page, meta = paginate(reviews, query['page'], query['limit'])
        return success('User reviews retrieved successfully', {'reviews': MyReviewSerializer(page, many=True).data}, meta)


class ReviewableProductsView(APIView):

    def get(self, request):
        products = [
            {
                'product': ReviewedProductSerializer(entry['product']).data,
                'order_id': entry['order_id'],
                'order_date': entry['order_date'],
            }
            for entry in services.reviewable_products(request.user)
        ]
        return success('Reviewable products retrieved successfully', {'products': products})
