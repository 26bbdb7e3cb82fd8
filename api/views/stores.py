"""
Seller store endpoints: discovery, enrollment, management and admin approval
"""
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdmin
from apps.core.utils import paginate
from apps.stores import services
from ..serializers.stores import (
    CreateStoreReviewSerializer,
    EnrollStoreSerializer,
    StoreAnalyticsQuerySerializer,
    StoreAnalyticsSerializer,
    StoreDetailSerializer,
    StoreQuerySerializer,
    StoreReviewSerializer,
    StoreSerializer,
    StoreStatusSerializer,
)
from ..serializers.common import page_query
from .base import PublicAPIView, PublicReadMixin, success, validate

PendingStoreQuerySerializer = page_query(max_limit=100, default_limit=20)


class StoreListView(PublicAPIView):
    """
    Store discovery over approved, active stores.
    """

    @extend_schema(parameters=[StoreQuerySerializer], responses={200: StoreSerializer(many=True)})
    def get(self, request):
        query = validate(StoreQuerySerializer, request.query_params)
        stores, meta = paginate(services.search_stores(query), query['page'], query['limit'])
        return success('Stores retrieved successfully', {'stores': StoreSerializer(stores, many=True).data}, meta)


class StoreDetailView(PublicReadMixin, PublicAPIView):
    """
    Public store page plus owner updates.
    """

    @extend_schema(responses={200: StoreDetailSerializer})
    def get(self, request, store_id):
        """
        Store detail with featured products and latest reviews.
        """
        store = services.get_public_store(store_id)
        return success('Store retrieved successfully', {'store': StoreDetailSerializer(store).data})

    @extend_schema(request=EnrollStoreSerializer, responses={200: StoreSerializer})
    def put(self, request, store_id):
        """
        Partial update by the store owner. Status and activity cannot be changed here.
        """
        data = validate(EnrollStoreSerializer, request.data, partial=True)
        store = services.update_store(request.user, store_id, data)
        return success('Store updated successfully', {'store': StoreSerializer(store).data})


class StoreEnrollView(APIView):
    """
    Submit a new store for approval; the caller becomes a seller if needed.
    """

    @extend_schema(request=EnrollStoreSerializer, responses={201: StoreSerializer})
    def post(self, request):
        data = validate(EnrollStoreSerializer, request.data)
        store = services.enroll_store(request.user, data)
        return success(
            'Store enrollment submitted successfully. Your store will be reviewed within 2-3 business days.',
            {'store': StoreSerializer(store).data},
            status_code=status.HTTP_201_CREATED,
        )


class MyStoresView(APIView):
    """
    Stores owned by the signed-in seller, in any status.
    """

    @extend_schema(responses={200: StoreSerializer(many=True)})
    def get(self, request):
        stores = services.seller_stores(request.user)
        return success('Stores retrieved successfully', {'stores': StoreSerializer(stores, many=True).data})


class StoreAnalyticsView(APIView):
    """
    Sales figures for one of the caller's stores over a period.
    """

    @extend_schema(parameters=[StoreAnalyticsQuerySerializer], responses={200: StoreAnalyticsSerializer})
    def get(self, request, store_id):
        query = validate(StoreAnalyticsQuerySerializer, request.query_params)
        analytics = services.store_analytics(request.user, store_id, query['period'])
        return success(
            'Store analytics retrieved successfully',
            {'analytics': StoreAnalyticsSerializer(analytics).data, 'period': query['period']},
        )


class StoreReviewCreateView(APIView):
    """
    Customer reviews of a store.
    """

    @extend_schema(request=CreateStoreReviewSerializer, responses={201: StoreReviewSerializer})
    def post(self, request, store_id):
        """
        Create a review and recompute the store rating.
        """
        data = validate(CreateStoreReviewSerializer, request.data)
        review = services.review_store(request.user, store_id, **data)
        return success(
            'Review created successfully',
            {'review': StoreReviewSerializer(review).data},
            status_code=status.HTTP_201_CREATED,
        )


class PendingStoresView(APIView):
    """
    Approval queue, oldest submissions first.
    """
    permission_classes = [IsAdmin]

    @extend_schema(responses={200: StoreSerializer(many=True)})
    def get(self, request):
        query = validate(PendingStoreQuerySerializer, request.query_params)
        stores, meta = paginate(services.pending_stores(), query['page'], query['limit'])
        return success('Pending stores retrieved successfully', {'stores': StoreSerializer(stores, many=True).data}, meta)


class StoreStatusView(APIView):
    """
    Administrator approval decisions.
    """
    permission_classes = [IsAdmin]

    @extend_schema(request=StoreStatusSerializer, responses={200: StoreSerializer})
    def patch(self, request, store_id):
        """
        Approve, reject or suspend a store; only approval activates it.
        """
        data = validate(StoreStatusSerializer, request.data)
        store = services.set_store_status(request.user, store_id, data['status'], data.get('reason'))
        return success(f"Store {data['status'].lower()} successfully", {'store': StoreSerializer(store).data})
