from decimal import Decimal

import pytest

from core.exceptions import Conflict, NotFound, ValidationFailure
from orders.services import create_order, cancel_order
from reviews.models import Review
from reviews.services import (
    create_review, approve_review, reject_review, get_product_reviews, get_rating_summary,
)

pytestmark = pytest.mark.django_db


def buy(user, product):
    return create_order(user.pk, [{'product_id': product.pk, 'quantity': 1, 'price': product.price}])


def test_review_requires_purchase(user, product):
    with pytest.raises(ValidationFailure, match='User must purchase product before reviewing'):
        create_review(user.pk, product.pk, 5)


def test_cancelled_purchase_does_not_count(user, product):
    order = buy(user, product)
    cancel_order(order.pk)

    with pytest.raises(ValidationFailure):
        create_review(user.pk, product.pk, 4)


def test_one_review_per_product(user, product):
    buy(user, product)
    create_review(user.pk, product.pk, 5, 'Works well')

    with pytest.raises(Conflict, match='User has already reviewed this product'):
        create_review(user.pk, product.pk, 3)


def test_missing_product():
    with pytest.raises(NotFound):
        create_review(1, 999, 5)


def test_moderation(user, product):
    buy(user, product)
    review = create_review(user.pk, product.pk, 4)

    assert review.is_approved is False
    assert list(get_product_reviews(product.pk)) == []

    approve_review(review.pk)
    assert list(get_product_reviews(product.pk)) == [review]

    assert reject_review(review.pk) == {'success': True}
    with pytest.raises(NotFound, match='Review not found'):
        approve_review(review.pk)


def test_rating_summary_counts_approved_only(user, other_user, admin_user, product):
    Review.objects.create(product=product, user=user, rating=5, is_approved=True)
    Review.objects.create(product=product, user=other_user, rating=4, is_approved=True)
    Review.objects.create(product=product, user=admin_user, rating=1, is_approved=False)

    summary = get_rating_summary(product.pk)

    assert summary == {
        'averageRating': Decimal('4.50'),
        'totalReviews': 2,
        'ratingDistribution': {1: 0, 2: 0, 3: 0, 4: 1, 5: 1},
    }


def test_create_procedure_validates_rating(rpc, user, product):
    status, body = rpc.post('reviews.create', {'user_id': user.pk, 'product_id': product.pk, 'rating': 6})

    assert status == 400
    assert 'rating' in body['details']
