"""
Store enrollment, approval workflow, store reviews and seller analytics
"""
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Dict

from django.db import IntegrityError, transaction
from django.db.models import Avg, Count, Q, Sum
from django.utils import timezone

from apps.catalog.models import Product
from apps.catalog.services import with_ratings
from apps.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from apps.core.utils import round_rating, unique_slug
from apps.orders.models import Order, OrderItem
from .models import Seller, Store, StoreReview

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    'name': 'name',
    'rating': 'rating',
    'created_at': 'created_at',
    'total_reviews': 'total_reviews',
}
ANALYTICS_PERIODS = {'7d': 7, '30d': 30, '90d': 90, '1y': 365}


def visible_stores():
    return Store.objects.filter(status=Store.APPROVED, is_active=True)


def with_counts(queryset):
    return queryset.annotate(
        product_count=Count('products', distinct=True),
        review_count=Count('store_reviews', distinct=True),
    )


def search_stores(filters: Dict):
    queryset = visible_stores()

    if filters.get('category'):
        queryset = queryset.filter(category__icontains=filters['category'])
    if filters.get('city'):
        queryset = queryset.filter(city__icontains=filters['city'])
    search = filters.get('search')
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) | Q(description__icontains=search) | Q(category__icontains=search)
        )
    if filters.get('rating') is not None:
        queryset = queryset.filter(rating__gte=filters['rating'])
    if filters.get('is_premium'):
        queryset = queryset.filter(is_premium=True)

    sort_field = SORT_FIELDS[filters.get('sort_by') or 'created_at']
    prefix = '' if filters.get('sort_order') == 'asc' else '-'
    return with_counts(queryset).select_related('seller').order_by(f"{prefix}{sort_field}", 'id')


FEATURED_PRODUCT_LIMIT = 12
LATEST_REVIEW_LIMIT = 5


def get_public_store(store_id) -> Store:
    """
    Store detail for shoppers; only approved, active stores are visible.
    """
    store = with_counts(Store.objects.filter(id=store_id)).select_related('seller').first()
    if store is None:
        raise NotFoundException('Store not found')
    if not store.is_visible:
        raise NotFoundException('Store not available')

    store.featured_products = list(
        with_ratings(Product.objects.filter(store=store, status=Product.ACTIVE))
        .prefetch_related('images')
        .order_by('-created_at')[:FEATURED_PRODUCT_LIMIT]
    )
    store.latest_reviews = list(
        StoreReview.objects.filter(store=store).select_related('user').order_by('-created_at')[:LATEST_REVIEW_LIMIT]
    )
    return store


def seller_for(user, create: bool = False) -> Seller:
    seller = Seller.objects.filter(Q(user=user) | Q(email=user.email)).first()
    if seller is None and create:
        seller = Seller.objects.create(
            user=user,
            name=user.full_name,
            email=user.email,
            description='New seller',
        )
    elif seller is not None and seller.user_id is None:
        seller.user = user
        seller.save(update_fields=['user', 'updated_at'])
    return seller


def enroll_store(user, data: Dict) -> Store:
    """
    Submit a store for review. Creates the caller's seller profile on first enrollment.
    """
    seller = seller_for(user, create=True)
    data = dict(data)
    if not data.get('country'):
        data['country'] = 'United States'

    store = Store.objects.create(
        seller=seller,
        slug=unique_slug(Store, data['name']),
        status=Store.PENDING,
        is_active=False,
        **data,
    )
    logger.info(f"New store enrollment: store {store.id} '{store.name}', seller {seller.id}, user {user.id}")
    return store


def seller_stores(user):
    seller = seller_for(user)
    if seller is None:
        return Store.objects.none()
    return with_counts(seller.stores.all()).order_by('-created_at')


def get_owned_store(user, store_id) -> Store:
    seller = seller_for(user)
    if seller is None:
        raise ForbiddenException('You must be a registered seller')
    store = Store.objects.filter(id=store_id, seller=seller).first()
    if store is None:
        raise NotFoundException('Store not found or access denied')
    return store


def update_store(user, store_id, changes: Dict) -> Store:
    store = get_owned_store(user, store_id)
    for name, value in changes.items():
        setattr(store, name, value)
    store.save()
    return store


def store_analytics(user, store_id, period: str = '30d') -> Dict:
    store = get_owned_store(user, store_id)
    start_date = timezone.now() - timedelta(days=ANALYTICS_PERIODS[period])

    lines = OrderItem.objects.filter(product__store=store, order__created_at__gte=start_date)

    return {
        'total_orders': lines.count(),
        'total_revenue': lines.aggregate(total=Sum('price'))['total'] or 0,
        'total_products': Product.objects.filter(store=store, status=Product.ACTIVE).count(),
        'average_rating': store.rating,
        'total_reviews': store.total_reviews,
    }


def review_store(user, store_id, rating: int, title: str, content: str, images=None) -> StoreReview:
    store = Store.objects.filter(id=store_id).first()
    if store is None or not store.is_visible:
        raise NotFoundException('Store not found')

    duplicate = ValidationException.for_field('review', 'You have already reviewed this store')
    if StoreReview.objects.filter(store=store, user=user).exists():
        raise duplicate

    is_verified = OrderItem.objects.filter(
        product__store=store,
        order__user=user,
        order__status=Order.DELIVERED,
    ).exists()

    try:
        with transaction.atomic():
            review = StoreReview.objects.create(
                store=store,
                user=user,
                rating=rating,
                title=title,
                content=content,
                images=images or [],
                is_verified=is_verified,
            )
            stats = StoreReview.objects.filter(store=store).aggregate(average=Avg('rating'), count=Count('id'))
            store.rating = Decimal(str(round_rating(stats['average'])))
            store.total_reviews = stats['count']
            store.save(update_fields=['rating', 'total_reviews', 'updated_at'])
    except IntegrityError:
        raise duplicate

    return review


def pending_stores():
    return Store.objects.filter(status=Store.PENDING).select_related('seller').order_by('created_at')


def set_store_status(admin, store_id, status: str, reason: str = None) -> Store:
    """
    Admin approval decision. `is_active` follows the decision at write time only.
    """
    store = Store.objects.filter(id=store_id).first()
    if store is None:
        raise NotFoundException('Store not found')

    store.status = status
    store.is_active = status == Store.APPROVED
    store.save(update_fields=['status', 'is_active', 'updated_at'])

    logger.info(
        f"Store status updated by admin {admin.id}: store {store.id} '{store.name}' -> {status}"
        + (f" ({reason})" if reason else "")
    )
    return store
