"""
Review workflows and rating aggregation
"""
import logging
from typing import Dict, List

from django.db import IntegrityError, transaction
from django.db.models import Avg, Count, F

from apps.catalog.models import Product
from apps.core.exceptions import ConflictException, NotFoundException, ValidationException
from apps.core.utils import round_rating
from apps.orders.models import Order, OrderItem
from .models import Review

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('rating', 'title', 'content', 'images')


def has_delivered_purchase(user, product_id) -> bool:
    return OrderItem.objects.filter(
        product_id=product_id,
        order__user=user,
        order__status=Order.DELIVERED,
    ).exists()


def create_review(user, product_id, rating: int, title: str, content: str, images: List[str] = None) -> Review:
    """
    Create the single review a user may leave on a product.
    """
    if not Product.objects.filter(id=product_id).exists():
        raise NotFoundException('Product not found')

    duplicate = ConflictException('You have already reviewed this product')
    if Review.objects.filter(user=user, product_id=product_id).exists():
        raise duplicate

    try:
        with transaction.atomic():
            review = Review.objects.create(
                user=user,
                product_id=product_id,
                rating=rating,
                title=title,
                content=content,
                images=images or [],
                is_verified=has_delivered_purchase(user, product_id),
            )
    except IntegrityError:
        # Concurrent request won the unique (user, product) constraint
        raise duplicate

    logger.info(f"Review {review.id} created by user {user.id} (verified={review.is_verified})")
    return review


def get_own_review(user, review_id, action: str) -> Review:
    review = Review.objects.filter(id=review_id, user=user).first()
    if review is None:
        raise NotFoundException(f"Review not found or you do not have permission to {action} this review")
    return review


def update_review(user, review_id, changes: Dict) -> Review:
    review = get_own_review(user, review_id, 'edit')
    fields = [name for name in EDITABLE_FIELDS if name in changes]
    for name in fields:
        setattr(review, name, changes[name])
    if fields:
        review.save(update_fields=fields + ['updated_at'])
    return review


def delete_review(user, review_id):
    get_own_review(user, review_id, 'delete').delete()


def vote_helpful(user, review_id, helpful: bool) -> Review:
    review = Review.objects.filter(id=review_id).first()
    if review is None:
        raise NotFoundException('Review not found')
    if review.user_id == user.id:
        raise ValidationException.for_field('review', 'You cannot rate your own review')

    counter = 'helpful' if helpful else 'not_helpful'
    Review.objects.filter(id=review.id).update(**{counter: F(counter) + 1})
    review.refresh_from_db(fields=['helpful', 'not_helpful'])
    return review


def rating_summary(product_id) -> Dict:
    """
    Average rating, review count and a 1..5 distribution for a product.
    """
    reviews = Review.objects.filter(product_id=product_id)
    aggregate = reviews.aggregate(average=Avg('rating'), count=Count('id'))
    counts = dict(reviews.values_list('rating').annotate(n=Count('id')).order_by())

    return {
        'average_rating': round_rating(aggregate['average']),
        'total_reviews': aggregate['count'],
        'distribution': [{'rating': value, 'count': counts.get(value, 0)} for value in range(1, 6)],
    }


def reviewable_products(user) -> List[Dict]:
    """
    Products from the user's delivered orders that they have not reviewed yet.
    """
    reviewed = set(Review.objects.filter(user=user).values_list('product_id', flat=True))
    items = (
        OrderItem.objects.filter(order__user=user, order__status=Order.DELIVERED)
        .select_related('product', 'order')
        .prefetch_related('product__images')
        .order_by('-order__created_at')
    )

    products = []
    seen = set()
    for item in items:
        if item.product_id in reviewed or item.product_id in seen:
            continue
        seen.add(item.product_id)
        products.append({'product': item.product, 'order_id': item.order_id, 'order_date': item.order.created_at})
    return products
