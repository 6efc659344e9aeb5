# reviews/services.py
import logging

from django.db import IntegrityError, transaction
from django.db.models import Avg, Count

from catalog.models import Product
from core.exceptions import Conflict, NotFound, ValidationFailure
from core.money import to_money
from orders.models import Order, OrderItem
from .models import Review

logger = logging.getLogger(__name__)


def has_purchased(user_id, product_id):
    return OrderItem.objects.filter(
        order__user_id=user_id,
        product_id=product_id,
    ).exclude(order__status=Order.STATUS_CANCELLED).exists()


def create_review(user_id, product_id, rating, comment=None):
    if not Product.objects.filter(pk=product_id).exists():
        raise NotFound(f"Product with id {product_id} not found")
    if not has_purchased(user_id, product_id):
        raise ValidationFailure("User must purchase product before reviewing")
    if Review.objects.filter(user_id=user_id, product_id=product_id).exists():
        raise Conflict("User has already reviewed this product")

    try:
        with transaction.atomic():
            review = Review.objects.create(
                user_id=user_id,
                product_id=product_id,
                rating=rating,
                comment=comment,
            )
    except IntegrityError:
        raise Conflict("User has already reviewed this product")

    logger.info(f"Review {review.pk} submitted by user {user_id} for product {product_id}")
    return review


def get_product_reviews(product_id, approved=True):
    return (
        Review.objects.filter(product_id=product_id, is_approved=approved)
        .select_related('user')
    )


def get_pending_reviews():
    return Review.objects.filter(is_approved=False).select_related('user', 'product')


def approve_review(review_id):
    review = Review.objects.filter(pk=review_id).first()
    if review is None:
        raise NotFound("Review not found")

    review.is_approved = True
    review.save(update_fields=['is_approved', 'updated_at'])
    logger.info(f"Review {review_id} approved")
    return review


def reject_review(review_id):
    deleted, _ = Review.objects.filter(pk=review_id).delete()
    if not deleted:
        raise NotFound("Review not found")
    logger.info(f"Review {review_id} rejected")
    return {'success': True}


def get_user_reviews(user_id):
    return Review.objects.filter(user_id=user_id).select_related('product')


def get_rating_summary(product_id):
    approved = Review.objects.filter(product_id=product_id, is_approved=True)
    stats = approved.aggregate(average=Avg('rating'), total=Count('id'))

    distribution = {rating: 0 for rating in range(1, 6)}
    for row in approved.order_by().values('rating').annotate(count=Count('id')):
        distribution[row['rating']] = row['count']

    return {
        'averageRating':      to_money(stats['average']),
        'totalReviews':       stats['total'],
        'ratingDistribution': distribution,
    }
