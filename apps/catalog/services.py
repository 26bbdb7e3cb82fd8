"""
Catalog queries and seller product management
"""
import logging
import time
from typing import Dict

from django.db import transaction
from django.db.models import Avg, Count, Prefetch, Q
from django.utils.text import slugify

from apps.accounts.models import User
from apps.core.exceptions import ForbiddenException, NotFoundException
from apps.stores.models import Seller, Store
from .models import Product, ProductImage

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    'title': 'title',
    'price': 'price',
    'rating': 'avg_rating',
    'created_at': 'created_at',
}


def with_ratings(queryset):
    return queryset.annotate(
        avg_rating=Avg('reviews__rating'),
        review_count=Count('reviews', distinct=True),
    )


def search_products(filters: Dict):
    """
    Marketplace listing with the filters accepted by GET /products.
    """
    queryset = Product.objects.marketplace_visible()

    search = filters.get('search')
    if search:
        queryset = queryset.filter(
            Q(title__icontains=search) | Q(description__icontains=search) | Q(brand__icontains=search)
        )
    if filters.get('category_id'):
        queryset = queryset.filter(category_id=filters['category_id'])
    if filters.get('brand'):
        queryset = queryset.filter(brand__icontains=filters['brand'])
    if filters.get('min_price') is not None:
        queryset = queryset.filter(price__gte=filters['min_price'])
    if filters.get('max_price') is not None:
        queryset = queryset.filter(price__lte=filters['max_price'])
    if filters.get('in_stock'):
        queryset = queryset.filter(in_stock=True, stock_quantity__gt=0)

    queryset = with_ratings(queryset)
    if filters.get('min_rating') is not None:
        queryset = queryset.filter(avg_rating__gte=filters['min_rating'])

    sort_field = SORT_FIELDS[filters.get('sort_by') or 'created_at']
    prefix = '' if filters.get('sort_order') == 'asc' else '-'

    return queryset.select_related('category', 'seller').prefetch_related(
        Prefetch('images', queryset=ProductImage.objects.order_by('sort_order'))
    ).order_by(f"{prefix}{sort_field}", 'id')


def get_product(product_id) -> Product:
    product = (
        with_ratings(Product.objects.filter(id=product_id))
        .select_related('category', 'seller', 'store')
        .prefetch_related('images')
        .first()
    )
    if product is None:
        raise NotFoundException('Product not found')
    return product


def _resolve_seller(user: User, seller_id=None) -> Seller:
    if user.role == User.SELLER:
        seller = Seller.objects.filter(user=user).first()
        if seller is None:
            raise ForbiddenException('You must be a registered seller')
        if seller_id and str(seller_id) != str(seller.id):
            raise ForbiddenException('Sellers can only create products for themselves')
        return seller

    if seller_id is None:
        return None
    seller = Seller.objects.filter(id=seller_id).first()
    if seller is None:
        raise NotFoundException('Seller not found')
    return seller


def _check_ownership(user: User, product: Product, action: str):
    if user.role != User.SELLER:
        return
    if product.seller is None or product.seller.user_id != user.id:
        raise ForbiddenException(f"Sellers can only {action} their own products")


def create_product(user: User, data: Dict) -> Product:
    data = dict(data)
    images = data.pop('images', [])
    seller = _resolve_seller(user, data.pop('seller_id', None))

    store_id = data.pop('store_id', None)
    store = None
    if store_id:
        store = Store.objects.filter(id=store_id).first()
        if store is None:
            raise NotFoundException('Store not found')
        if seller is not None and store.seller_id != seller.id:
            raise ForbiddenException('Store does not belong to this seller')

    with transaction.atomic():
        product = Product.objects.create(
            slug=f"{slugify(data['title'])}-{int(time.time() * 1000)}",
            seller=seller,
            store=store,
            **data,
        )
        ProductImage.objects.bulk_create([
            ProductImage(product=product, url=image['url'], alt=image.get('alt'), sort_order=index)
            for index, image in enumerate(images)
        ])

    logger.info(f"Product {product.id} created by user {user.id}")
    return get_product(product.id)


def update_product(user: User, product_id, changes: Dict) -> Product:
    product = Product.objects.select_related('seller').filter(id=product_id).first()
    if product is None:
        raise NotFoundException('Product not found')
    _check_ownership(user, product, 'update')

    for name, value in changes.items():
        setattr(product, name, value)
    product.save()
    return get_product(product.id)


def delete_product(user: User, product_id):
    product = Product.objects.select_related('seller').filter(id=product_id).first()
    if product is None:
        raise NotFoundException('Product not found')
    _check_ownership(user, product, 'delete')
    product.delete()
    logger.info(f"Product {product_id} deleted by user {user.id}")
