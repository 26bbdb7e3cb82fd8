"""
Product catalog endpoints
"""
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated

from apps.accounts.permissions import IsSellerOrAdmin
from apps.catalog import services
from apps.core.utils import paginate
from ..serializers.catalog import (
    ProductDetailSerializer,
    ProductQuerySerializer,
    ProductSerializer,
    ProductWriteSerializer,
)
from .base import PublicAPIView, PublicReadMixin, success, validate

UPDATE_EXCLUDED_FIELDS = ('images', 'seller_id', 'store_id')


class SellerWriteMixin(PublicReadMixin):
    write_permission_classes = [IsAuthenticated, IsSellerOrAdmin]


class ProductListView(SellerWriteMixin, PublicAPIView):

    @extend_schema(parameters=[ProductQuerySerializer], responses={200: ProductSerializer(many=True)})
    def get(self, request):
        query = validate(ProductQuerySerializer, request.query_params)
        products, meta = paginate(services.search_products(query), query['page'], query['limit'])
        return success(
            'Products retrieved successfully',
            {'products': ProductSerializer(products, many=True).data},
            meta,
        )

    @extend_schema(request=ProductWriteSerializer, responses={201: ProductDetailSerializer})
    def post(self, request):
        data = validate(ProductWriteSerializer, request.data)
        product = services.create_product(request.user, data)
        return success(
            'Product created successfully',
            {'product': ProductDetailSerializer(product).data},
            status_code=status.HTTP_201_CREATED,
        )


class ProductDetailView(SellerWriteMixin, PublicAPIView):

    @extend_schema(responses={200: ProductDetailSerializer})
    def get(self, request, product_id):
        product = services.get_product(product_id)
        return success('Product retrieved successfully', {'product': ProductDetailSerializer(product).data})

    @extend_schema(request=ProductWriteSerializer, responses={200: ProductDetailSerializer})
    def put(self, request, product_id):
        data = validate(ProductWriteSerializer, request.data, partial=True)
        changes = {name: value for name, value in data.items() if name not in UPDATE_EXCLUDED_FIELDS}
        product = services.update_product(request.user, product_id, changes)
        return success('Product updated successfully', {'product': ProductDetailSerializer(product).data})

    def delete(self, request, product_id):
        services.delete_product(request.user, product_id)
        return success('Product deleted successfully')
