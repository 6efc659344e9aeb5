# reviews/procedures.py
from core.forms import IdForm
from core.rpc import procedure
from . import services
from .forms import ReviewCreateForm, ProductReviewsForm, UserReviewsForm, RatingSummaryForm


def serialize_review(review):
    return {
        'id':          review.pk,
        'user_id':     review.user_id,
        'product_id':  review.product_id,
        'rating':      review.rating,
        'comment':     review.comment,
        'is_approved': review.is_approved,
        'created_at':  review.created_at,
        'updated_at':  review.updated_at,
    }


@procedure('reviews.create', form=ReviewCreateForm, mutation=True)
def reviews_create(data):
    return serialize_review(services.create_review(**data))


@procedure('reviews.getProductReviews', form=ProductReviewsForm)
def reviews_get_product_reviews(data):
    approved = data.get('approved')
    reviews = services.get_product_reviews(data['productId'], True if approved is None else approved)
    result = []
    for review in reviews:
        row = serialize_review(review)
        row['user'] = {'first_name': review.user.first_name, 'last_name': review.user.last_name}
        result.append(row)
    return result


@procedure('reviews.getPending')
def reviews_get_pending(data):
    result = []
    for review in services.get_pending_reviews():
        row = serialize_review(review)
        row['user'] = {
            'first_name': review.user.first_name,
            'last_name':  review.user.last_name,
            'email':      review.user.email,
        }
        row['product'] = {'name': review.product.name}
        result.append(row)
    return result


@procedure('reviews.approve', form=IdForm, mutation=True)
def reviews_approve(data):
    return serialize_review(services.approve_review(data['id']))


@procedure('reviews.reject', form=IdForm, mutation=True)
def reviews_reject(data):
    return services.reject_review(data['id'])


@procedure('reviews.getUserReviews', form=UserReviewsForm)
def reviews_get_user_reviews(data):
    result = []
    for review in services.get_user_reviews(data['userId']):
        row = serialize_review(review)
        row['product'] = {'name': review.product.name, 'image_url': review.product.image_url}
        result.append(row)
    return result


@procedure('reviews.getRatingSummary', form=RatingSummaryForm)
def reviews_get_rating_summary(data):
    return services.get_rating_summary(data['productId'])
